# Read access to books and users for the order services.
from sqlmodel import Session

from bookshop.exceptions import BookNotFoundError, InactiveUserError, UserNotFoundError
from bookshop.models.book import Book
from bookshop.models.user import User


def get_book(session: Session, book_id: int) -> Book:
    book = session.get(Book, book_id)
    if book is None:
        raise BookNotFoundError(book_id)
    return book


def get_active_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    if not user.is_active:
        raise InactiveUserError(user_id)
    return user
