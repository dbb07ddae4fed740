"""Stock reservation and release for books.

``Book.stock`` is the only piece of state shared between concurrent
checkouts, so every change to it goes through this module. Both operations
are single guarded ``UPDATE`` statements: the database applies the check and
the decrement together, which keeps ``stock >= 0`` even when two requests race
for the last copies.

Nothing here commits. The caller owns the transaction.
"""
import logging
from typing import Dict, Iterable

from sqlalchemy import update
from sqlmodel import Session, select

from bookshop.exceptions import BookNotFoundError, InsufficientStockError
from bookshop.models.book import Book

logger = logging.getLogger(__name__)


def lock_books(session: Session, book_ids: Iterable[int]) -> Dict[int, Book]:
    """Load fresh copies of the given books, locking their rows.

    Rows are locked in id order so two checkouts sharing books cannot
    deadlock. Backends without row locks (SQLite) ignore ``FOR UPDATE``.
    """
    ids = sorted(set(book_ids))
    books = session.exec(
        select(Book)
        .where(Book.id.in_(ids))
        .order_by(Book.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).all()
    return {book.id: book for book in books}


def reserve(session: Session, book_id: int, quantity: int) -> int:
    """Take ``quantity`` copies off the shelf and return the stock left.

    Raises InsufficientStockError when fewer than ``quantity`` copies remain.
    """
    if quantity <= 0:
        raise ValueError("Reservation quantity must be positive")

    result = session.execute(
        update(Book)
        .where(Book.id == book_id, Book.stock >= quantity)
        .values(stock=Book.stock - quantity)
        .execution_options(synchronize_session=False)
    )
    book = session.get(Book, book_id, populate_existing=True)
    if book is None:
        raise BookNotFoundError(book_id)
    if result.rowcount != 1:
        raise InsufficientStockError(book.id, book.title, book.stock, quantity)

    logger.info(f"Reserved {quantity} of book {book_id}, stock now {book.stock}")
    return book.stock


def release(session: Session, book_id: int, quantity: int) -> int:
    """Put ``quantity`` copies back on the shelf and return the new stock.

    There is no upper bound: stock may end above any earlier level.
    """
    if quantity <= 0:
        raise ValueError("Release quantity must be positive")

    result = session.execute(
        update(Book)
        .where(Book.id == book_id)
        .values(stock=Book.stock + quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise BookNotFoundError(book_id)

    book = session.get(Book, book_id, populate_existing=True)
    logger.info(f"Released {quantity} of book {book_id}, stock now {book.stock}")
    return book.stock
