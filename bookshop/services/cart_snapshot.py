from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

from sqlalchemy import delete
from sqlmodel import Session, select

from bookshop.exceptions import EmptyCartError
from bookshop.models.book import Book
from bookshop.models.cart import CartItem


@dataclass(frozen=True)
class CartLine:
    """One cart row as it looked when checkout started.

    ``unit_price`` is the book price at read time and becomes the order
    line's historical price.
    """

    cart_item_id: int
    book_id: int
    book_title: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


def snapshot_cart(session: Session, user_id: int) -> List[CartLine]:
    rows = session.exec(
        select(CartItem, Book)
        .join(Book, CartItem.book_id == Book.id)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.id)
    ).all()

    if not rows:
        raise EmptyCartError()

    return [
        CartLine(
            cart_item_id=cart_item.id,
            book_id=book.id,
            book_title=book.title,
            quantity=cart_item.quantity,
            unit_price=book.price,
        )
        for cart_item, book in rows
    ]


def clear_cart_lines(session: Session, user_id: int, lines: Sequence[CartLine]) -> int:
    """Delete exactly the cart rows captured in ``lines``; rows added later stay."""
    ids = [line.cart_item_id for line in lines]
    if not ids:
        return 0
    result = session.execute(
        delete(CartItem)
        .where(CartItem.user_id == user_id, CartItem.id.in_(ids))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
