"""Pytest fixtures for bookshop tests.

Every test gets its own in-memory SQLite database. ``StaticPool`` keeps one
connection alive so the test session and the sessions opened by the app
see the same data.
"""

import os

os.environ.setdefault("SQLALCHEMY_DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import itertools
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from bookshop import models  # noqa: F401
from bookshop.database import get_session
from bookshop.main import app
from bookshop.models import Book, CartItem, User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    counter = itertools.count(1)

    def _make_user(first_name="Ada", last_name="Reader", is_active=True, role="customer"):
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=f"reader{next(counter)}@example.com",
            is_active=is_active,
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_book(session):
    def _make_book(title="Dune", price="10.00", stock=5):
        book = Book(title=title, price=Decimal(price), stock=stock)
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    return _make_book


@pytest.fixture
def fill_cart(session):
    """fill_cart(user, (book, qty), (book, qty), ...)"""

    def _fill_cart(user, *lines):
        for book, quantity in lines:
            session.add(CartItem(user_id=user.id, book_id=book.id, quantity=quantity))
        session.commit()

    return _fill_cart
