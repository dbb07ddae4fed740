from fastapi import APIRouter, Depends
from sqlmodel import Session

from bookshop.database import get_session
from bookshop.exceptions import PaymentNotFoundError
from bookshop.schemas.payment_schemas import PaymentCreated, PaymentStatusOut
from bookshop.services.payment_service import (
    PaymentGateway,
    complete_payment,
    create_payment,
    get_payment,
    get_payment_gateway,
)

router = APIRouter()


@router.post("/create/{order_id}", response_model=PaymentCreated)
async def create_order_payment(
    order_id: int,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    payment = await create_payment(session, gateway, order_id)
    return PaymentCreated(client_secret=payment.client_secret)


@router.post("/complete/{order_id}")
async def complete_order_payment(
    order_id: int,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    await complete_payment(session, gateway, order_id)
    return {"message": "Payment completed successfully"}


@router.get("/status/{order_id}", response_model=PaymentStatusOut)
def payment_status(order_id: int, session: Session = Depends(get_session)):
    payment = get_payment(session, order_id)
    if payment is None:
        raise PaymentNotFoundError(order_id)

    return PaymentStatusOut(
        status=payment.status,
        amount=payment.amount,
        created_date=payment.created_at,
        completed_date=payment.completed_at,
    )
