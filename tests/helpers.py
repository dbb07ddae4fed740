from sqlmodel import select

from bookshop.models import Book, CartItem, Order


def stock_of(session, book_id):
    return session.get(Book, book_id, populate_existing=True).stock


def cart_size(session, user_id):
    return len(session.exec(select(CartItem).where(CartItem.user_id == user_id)).all())


def order_count(session):
    return len(session.exec(select(Order)).all())
