"""Order status changes and cancellation.

``update_status`` is the admin path and follows ``ALLOWED_TRANSITIONS``.
``cancel_order`` is the customer path and only accepts Pending orders. Both
put stock back whenever an order ends up Cancelled; Cancelled is terminal,
so that happens at most once per order.
"""
import logging
from typing import Callable

from sqlalchemy import update
from sqlmodel import Session

from bookshop.constants.order_status import OrderStatus, is_valid_transition
from bookshop.exceptions import (
    BookshopError,
    CannotCancelError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    UnexpectedError,
)
from bookshop.models.order import Order
from bookshop.services import stock_ledger
from bookshop.services.order_service import get_order, list_order_items

logger = logging.getLogger(__name__)


def update_status(session: Session, order_id: int, new_status: OrderStatus) -> Order:
    order = get_order(session, order_id)
    if not is_valid_transition(order.status, new_status):
        raise InvalidStatusTransitionError(order.status, new_status)

    return _apply_status(
        session,
        order,
        new_status,
        on_conflict=lambda current: InvalidStatusTransitionError(current, new_status),
    )


def cancel_order(session: Session, order_id: int) -> Order:
    order = get_order(session, order_id)
    if order.status != OrderStatus.PENDING:
        raise CannotCancelError(order.status)

    return _apply_status(
        session,
        order,
        OrderStatus.CANCELLED,
        on_conflict=CannotCancelError,
    )


def restore_stock(session: Session, order_id: int) -> int:
    """Release every line of the order back to stock. Returns copies restored."""
    restored = 0
    for item in list_order_items(session, order_id):
        stock_ledger.release(session, item.book_id, item.quantity)
        restored += item.quantity
    return restored


def _apply_status(
    session: Session,
    order: Order,
    new_status: OrderStatus,
    on_conflict: Callable[[OrderStatus], BookshopError],
) -> Order:
    order_id = order.id
    previous = order.status
    try:
        # compare-and-set: a concurrent request that already moved the
        # order makes this match zero rows
        result = session.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == previous)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = session.get(Order, order_id, populate_existing=True)
            if current is None:
                raise OrderNotFoundError(order_id)
            raise on_conflict(current.status)

        if new_status == OrderStatus.CANCELLED:
            restored = restore_stock(session, order_id)
            logger.info(f"Order {order_id}: restored {restored} copies to stock")

        session.commit()

    except BookshopError:
        session.rollback()
        raise
    except Exception as e:
        session.rollback()
        logger.exception(f"Status change {previous.value} -> {new_status.value} failed for order {order_id}")
        raise UnexpectedError() from e

    order = session.get(Order, order_id, populate_existing=True)
    logger.info(f"Order {order_id}: {previous.value} -> {new_status.value}")
    return order
