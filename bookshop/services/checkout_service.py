"""Cart -> order checkout.

One call is one unit of work:

    snapshot cart -> lock and re-check stock -> create order + items
        -> reserve stock -> delete the snapshot's cart rows -> commit

Any failure after the snapshot rolls the whole thing back, so a failed
checkout leaves no order, no stock change and an untouched cart.
"""
import logging

from sqlmodel import Session

from bookshop.exceptions import (
    BookNotFoundError,
    BookshopError,
    InsufficientStockError,
    UnexpectedError,
)
from bookshop.models.order import Order
from bookshop.services import stock_ledger
from bookshop.services.cart_snapshot import clear_cart_lines, snapshot_cart
from bookshop.services.catalog import get_active_user
from bookshop.services.order_service import create_order

logger = logging.getLogger(__name__)


def checkout(session: Session, user_id: int) -> Order:
    try:
        get_active_user(session, user_id)
        lines = snapshot_cart(session, user_id)
        logger.info(f"Checking out {len(lines)} cart lines for user {user_id}")

        # stock may have moved since the snapshot; check the locked rows
        books = stock_ledger.lock_books(session, [line.book_id for line in lines])
        for line in lines:
            book = books.get(line.book_id)
            if book is None:
                raise BookNotFoundError(line.book_id)
            if line.quantity > book.stock:
                raise InsufficientStockError(book.id, book.title, book.stock, line.quantity)

        order, _ = create_order(session, user_id, lines)

        for line in lines:
            stock_ledger.reserve(session, line.book_id, line.quantity)

        clear_cart_lines(session, user_id, lines)
        session.commit()

    except BookshopError as e:
        session.rollback()
        logger.info(f"Checkout rejected for user {user_id}: {e.message}")
        raise
    except Exception as e:
        session.rollback()
        logger.exception(f"Checkout failed for user {user_id}")
        raise UnexpectedError() from e

    session.refresh(order)
    logger.info(f"Order {order.id} placed for user {user_id}, total {order.total_price}")
    return order
