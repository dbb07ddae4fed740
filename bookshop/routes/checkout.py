from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from bookshop.database import get_session
from bookshop.schemas.checkout_schemas import CheckoutRequest, OrderSummary
from bookshop.services.checkout_service import checkout
from bookshop.services.order_service import item_counts

router = APIRouter()


@router.post("", response_model=OrderSummary, status_code=status.HTTP_201_CREATED)
def checkout_cart(
    data: CheckoutRequest,
    response: Response,
    session: Session = Depends(get_session),
):
    """Turn the user's cart into a Pending order."""
    order = checkout(session, data.user_id)
    response.headers["Location"] = f"/orders/{order.id}"

    return OrderSummary(
        id=order.id,
        user_id=order.user_id,
        order_date=order.order_date,
        total_price=order.total_price,
        status=order.status,
        item_count=item_counts(session, [order.id]).get(order.id, 0),
    )
