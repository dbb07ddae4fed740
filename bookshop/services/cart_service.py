import logging
from typing import List, Tuple

from sqlalchemy import delete
from sqlmodel import Session, select

from bookshop.exceptions import CartItemNotFoundError, CartStockError
from bookshop.models.book import Book
from bookshop.models.cart import CartItem
from bookshop.services.catalog import get_book

logger = logging.getLogger(__name__)


def get_cart(session: Session, user_id: int) -> List[Tuple[CartItem, Book]]:
    return list(
        session.exec(
            select(CartItem, Book)
            .join(Book, CartItem.book_id == Book.id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        ).all()
    )


def _find_item(session: Session, user_id: int, book_id: int):
    return session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.book_id == book_id
        )
    ).first()


def add_to_cart(session: Session, user_id: int, book_id: int, quantity: int) -> CartItem:
    book = get_book(session, book_id)

    if quantity > book.stock:
        raise CartStockError(f"Insufficient stock. Available: {book.stock}")

    existing_item = _find_item(session, user_id, book_id)

    if existing_item:
        new_quantity = existing_item.quantity + quantity
        if new_quantity > book.stock:
            raise CartStockError(
                f"Total quantity ({new_quantity}) exceeds available stock ({book.stock})"
            )
        existing_item.quantity = new_quantity
        item = existing_item
    else:
        item = CartItem(user_id=user_id, book_id=book_id, quantity=quantity)

    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info(f"Cart of user {user_id}: book {book_id} x{item.quantity}")
    return item


def update_cart_item(session: Session, user_id: int, book_id: int, quantity: int) -> CartItem:
    item = _find_item(session, user_id, book_id)
    if not item:
        raise CartItemNotFoundError(user_id, book_id)

    book = get_book(session, book_id)
    if quantity > book.stock:
        raise CartStockError(f"Insufficient stock. Available: {book.stock}")

    item.quantity = quantity
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def remove_cart_item(session: Session, user_id: int, book_id: int) -> None:
    item = _find_item(session, user_id, book_id)
    if not item:
        raise CartItemNotFoundError(user_id, book_id)

    session.delete(item)
    session.commit()


def clear_cart(session: Session, user_id: int) -> int:
    result = session.execute(
        delete(CartItem).where(CartItem.user_id == user_id)
    )
    session.commit()
    return result.rowcount
