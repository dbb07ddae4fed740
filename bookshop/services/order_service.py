"""Order creation and explicit order reads.

Orders are built once from a cart snapshot and never re-priced: each
``OrderItem`` keeps the unit price it was sold at, and ``Order.total_price``
is fixed at creation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from sqlmodel import Session, func, select

from bookshop.constants.order_status import OrderStatus
from bookshop.exceptions import EmptyCartError, OrderNotFoundError
from bookshop.models.order import Order
from bookshop.models.order_item import OrderItem
from bookshop.services.cart_snapshot import CartLine


def order_total(lines: Sequence[CartLine]) -> Decimal:
    return sum((line.unit_price * line.quantity for line in lines), Decimal("0.00"))


def create_order(
    session: Session,
    user_id: int,
    lines: Sequence[CartLine],
) -> Tuple[Order, List[OrderItem]]:
    """Add a Pending order and its items to the session (flushed, not committed)."""
    if not lines:
        raise EmptyCartError()

    now = datetime.utcnow()
    order = Order(
        user_id=user_id,
        order_date=now,
        created_date=now,
        total_price=order_total(lines),
        status=OrderStatus.PENDING,
    )
    session.add(order)
    session.flush()  # need order.id for the items

    items = [
        OrderItem(
            order_id=order.id,
            book_id=line.book_id,
            book_title=line.book_title,
            unit_price=line.unit_price,
            quantity=line.quantity,
        )
        for line in lines
    ]
    session.add_all(items)
    session.flush()
    return order, items


def get_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


def list_order_items(session: Session, order_id: int) -> List[OrderItem]:
    return list(
        session.exec(
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
        ).all()
    )


def item_counts(session: Session, order_ids: Sequence[int]) -> Dict[int, int]:
    """Total quantity ordered per order id."""
    if not order_ids:
        return {}
    rows = session.exec(
        select(OrderItem.order_id, func.sum(OrderItem.quantity))
        .where(OrderItem.order_id.in_(list(order_ids)))
        .group_by(OrderItem.order_id)
    ).all()
    return {order_id: int(total or 0) for order_id, total in rows}
