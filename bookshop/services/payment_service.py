import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional
from uuid import uuid4

from sqlmodel import Session, select

from bookshop.config import settings
from bookshop.constants.order_status import OrderStatus, PaymentStatus
from bookshop.exceptions import (
    InvalidStatusTransitionError,
    PaymentError,
    PaymentNotFoundError,
)
from bookshop.models.payment import Payment
from bookshop.services.order_lifecycle import update_status
from bookshop.services.order_service import get_order

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised by a gateway when it rejects or cannot process a call."""


@dataclass
class PaymentIntent:
    id: str
    client_secret: str
    amount: int  # minor units (cents)
    currency: str
    status: str  # requires_payment_method | processing | succeeded | canceled
    metadata: Dict[str, str] = field(default_factory=dict)


class PaymentGateway(ABC):

    @abstractmethod
    async def create_intent(
        self, amount: int, currency: str, metadata: Dict[str, str]
    ) -> PaymentIntent:
        ...

    @abstractmethod
    async def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        ...


class MockPaymentGateway(PaymentGateway):
    """In-process gateway: every intent succeeds as soon as it is created."""

    def __init__(self):
        self._intents: Dict[str, PaymentIntent] = {}

    async def create_intent(self, amount, currency, metadata):
        if amount <= 0:
            raise PaymentGatewayError("Amount must be positive")
        intent_id = f"pi_{uuid4().hex[:24]}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:16]}",
            amount=amount,
            currency=currency,
            status="succeeded",
            metadata=dict(metadata),
        )
        self._intents[intent_id] = intent
        logger.info(f"Created payment intent {intent_id} for {amount} {currency}")
        return intent

    async def retrieve_intent(self, intent_id):
        try:
            return self._intents[intent_id]
        except KeyError:
            raise PaymentGatewayError(f"No such payment intent: {intent_id}") from None


payment_gateway = MockPaymentGateway()


def get_payment_gateway() -> PaymentGateway:
    return payment_gateway


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def get_payment(session: Session, order_id: int) -> Optional[Payment]:
    return session.exec(
        select(Payment)
        .where(Payment.order_id == order_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
    ).first()


async def create_payment(session: Session, gateway: PaymentGateway, order_id: int) -> Payment:
    order = get_order(session, order_id)
    if order.status != OrderStatus.PENDING:
        raise PaymentError("Order is not pending payment")

    try:
        intent = await gateway.create_intent(
            amount=to_minor_units(order.total_price),
            currency=settings.payment_currency,
            metadata={"order_id": str(order.id)},
        )
    except PaymentGatewayError as e:
        logger.warning(f"Payment creation failed for order {order_id}: {e}")
        raise PaymentError(f"Payment creation failed: {e}") from e

    payment = Payment(
        order_id=order.id,
        amount=order.total_price,
        method="card",
        status=PaymentStatus.PENDING,
        intent_id=intent.id,
        client_secret=intent.client_secret,
        created_at=datetime.utcnow(),
    )
    session.add(payment)
    session.commit()
    session.refresh(payment)
    return payment


async def complete_payment(session: Session, gateway: PaymentGateway, order_id: int) -> Payment:
    """Record the gateway's verdict, then confirm the order if it was paid.

    A captured payment is stored as Succeeded even when the order can no
    longer be confirmed; the caller then gets a PaymentError.
    """
    payment = get_payment(session, order_id)
    if payment is None:
        raise PaymentNotFoundError(order_id)

    if payment.status != PaymentStatus.SUCCEEDED:
        try:
            intent = await gateway.retrieve_intent(payment.intent_id)
        except PaymentGatewayError as e:
            logger.warning(f"Payment verification failed for order {order_id}: {e}")
            raise PaymentError(f"Payment verification failed: {e}") from e

        if intent.status != "succeeded":
            payment.status = PaymentStatus.FAILED
            session.add(payment)
            session.commit()
            raise PaymentError("Payment failed")

        payment.status = PaymentStatus.SUCCEEDED
        payment.completed_at = datetime.utcnow()
        session.add(payment)
        session.commit()
        logger.info(f"Payment {payment.id} succeeded for order {order_id}")

    _confirm_paid_order(session, order_id)
    session.refresh(payment)
    return payment


def _confirm_paid_order(session: Session, order_id: int) -> None:
    order = get_order(session, order_id)
    if order.status in (OrderStatus.CONFIRMED, OrderStatus.COMPLETED):
        return

    try:
        update_status(session, order_id, OrderStatus.CONFIRMED)
    except InvalidStatusTransitionError as e:
        logger.warning(
            f"Order {order_id} was paid but is {e.current.value}; it cannot be confirmed"
        )
        raise PaymentError(
            f"Payment received, but order with status '{e.current.value}' cannot be confirmed"
        ) from e

    logger.info(f"Order {order_id} confirmed after payment")
