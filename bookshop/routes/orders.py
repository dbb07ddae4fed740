from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session, select

from bookshop.constants.order_status import OrderStatus
from bookshop.database import get_session
from bookshop.models.order import Order
from bookshop.schemas.checkout_schemas import OrderSummary
from bookshop.schemas.orders_schemas import (
    OrderDetail,
    OrderItemOut,
    OrderPage,
    UpdateOrderStatusRequest,
)
from bookshop.services.order_lifecycle import cancel_order, update_status
from bookshop.services.order_service import get_order, item_counts, list_order_items
from bookshop.utils.pagination import paginate

router = APIRouter()


def _summaries(session: Session, orders) -> List[OrderSummary]:
    counts = item_counts(session, [o.id for o in orders])
    return [
        OrderSummary(
            id=o.id,
            user_id=o.user_id,
            order_date=o.order_date,
            total_price=o.total_price,
            status=o.status,
            item_count=counts.get(o.id, 0),
        )
        for o in orders
    ]


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    query = select(Order).order_by(Order.order_date.desc(), Order.id.desc())
    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        transform=lambda orders: _summaries(session, orders),
    )


@router.get("/user/{user_id}", response_model=List[OrderSummary])
def user_orders(user_id: int, session: Session = Depends(get_session)):
    orders = session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.order_date.desc(), Order.id.desc())
    ).all()
    return _summaries(session, orders)


@router.get("/status/{order_status}", response_model=List[OrderSummary])
def orders_by_status(order_status: OrderStatus, session: Session = Depends(get_session)):
    orders = session.exec(
        select(Order)
        .where(Order.status == order_status)
        .order_by(Order.order_date.desc(), Order.id.desc())
    ).all()
    return _summaries(session, orders)


@router.get("/{order_id}", response_model=OrderDetail)
def order_details(order_id: int, session: Session = Depends(get_session)):
    order = get_order(session, order_id)
    items = list_order_items(session, order.id)

    return OrderDetail(
        id=order.id,
        user_id=order.user_id,
        order_date=order.order_date,
        created_date=order.created_date,
        total_price=order.total_price,
        status=order.status,
        item_count=sum(i.quantity for i in items),
        items=[
            OrderItemOut(
                id=i.id,
                order_id=i.order_id,
                book_id=i.book_id,
                book_title=i.book_title,
                quantity=i.quantity,
                unit_price=i.unit_price,
                line_total=i.line_total,
            )
            for i in items
        ],
    )


@router.put("/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def change_order_status(
    order_id: int,
    data: UpdateOrderStatusRequest,
    session: Session = Depends(get_session),
):
    update_status(session, order_id, data.status)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel(order_id: int, session: Session = Depends(get_session)):
    """Customer cancellation; only Pending orders qualify."""
    cancel_order(session, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
