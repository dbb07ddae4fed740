"""Tests for order status transitions and cancellation."""

from decimal import Decimal

import pytest
from sqlmodel import Session

from bookshop.constants.order_status import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    OrderStatus,
    is_valid_transition,
)
from bookshop.exceptions import (
    CannotCancelError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    UnexpectedError,
)
from bookshop.models import Order
from bookshop.services import order_lifecycle
from bookshop.services.checkout_service import checkout
from bookshop.services.order_lifecycle import cancel_order, update_status
from bookshop.services.order_service import list_order_items
from tests.helpers import stock_of


@pytest.fixture
def placed(session, make_user, make_book, fill_cart):
    """A Pending order for 2 x A (stock 5 -> 3) and 1 x B (stock 1 -> 0)."""
    user = make_user()
    a = make_book(title="A", price="10.00", stock=5)
    b = make_book(title="B", price="5.00", stock=1)
    fill_cart(user, (a, 2), (b, 1))
    order = checkout(session, user.id)
    return order.id, a.id, b.id


class TestTransitionTable:

    @pytest.mark.parametrize("current,new", [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.CONFIRMED, OrderStatus.COMPLETED),
        (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
    ])
    def test_allowed(self, current, new):
        assert is_valid_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        (OrderStatus.PENDING, OrderStatus.COMPLETED),
        (OrderStatus.PENDING, OrderStatus.PENDING),
        (OrderStatus.CONFIRMED, OrderStatus.PENDING),
        (OrderStatus.COMPLETED, OrderStatus.CONFIRMED),
        (OrderStatus.CANCELLED, OrderStatus.PENDING),
    ])
    def test_rejected(self, current, new):
        assert not is_valid_transition(current, new)

    def test_terminal_states(self):
        assert TERMINAL_STATUSES == {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
        assert set(ALLOWED_TRANSITIONS) == set(OrderStatus)


class TestUpdateStatus:

    def test_pending_to_confirmed(self, session, placed):
        order_id, _, _ = placed
        order = update_status(session, order_id, OrderStatus.CONFIRMED)
        assert order.status == OrderStatus.CONFIRMED

    def test_full_happy_path(self, session, placed):
        order_id, a_id, _ = placed
        update_status(session, order_id, OrderStatus.CONFIRMED)
        order = update_status(session, order_id, OrderStatus.COMPLETED)
        assert order.status == OrderStatus.COMPLETED
        assert stock_of(session, a_id) == 3

    def test_completed_to_confirmed_rejected(self, session, placed):
        order_id, _, _ = placed
        update_status(session, order_id, OrderStatus.CONFIRMED)
        update_status(session, order_id, OrderStatus.COMPLETED)

        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            update_status(session, order_id, OrderStatus.CONFIRMED)

        assert exc_info.value.message == "Invalid status transition from Completed to Confirmed"
        assert session.get(Order, order_id, populate_existing=True).status == OrderStatus.COMPLETED

    def test_pending_to_completed_rejected(self, session, placed):
        order_id, _, _ = placed
        with pytest.raises(InvalidStatusTransitionError):
            update_status(session, order_id, OrderStatus.COMPLETED)

    def test_cancel_from_confirmed_restores_stock(self, session, placed):
        order_id, a_id, b_id = placed
        update_status(session, order_id, OrderStatus.CONFIRMED)

        order = update_status(session, order_id, OrderStatus.CANCELLED)

        assert order.status == OrderStatus.CANCELLED
        assert stock_of(session, a_id) == 5
        assert stock_of(session, b_id) == 1

    def test_missing_order(self, session):
        with pytest.raises(OrderNotFoundError):
            update_status(session, 123, OrderStatus.CONFIRMED)


class TestCancelOrder:

    def test_cancel_pending_restores_stock(self, session, placed):
        order_id, a_id, b_id = placed

        order = cancel_order(session, order_id)

        assert order.status == OrderStatus.CANCELLED
        assert stock_of(session, a_id) == 5
        assert stock_of(session, b_id) == 1

    def test_lines_untouched_by_cancel(self, session, placed):
        order_id, _, _ = placed
        before = [(i.book_id, i.quantity, i.unit_price) for i in list_order_items(session, order_id)]

        cancel_order(session, order_id)

        after = [(i.book_id, i.quantity, i.unit_price) for i in list_order_items(session, order_id)]
        assert after == before
        assert session.get(Order, order_id).total_price == Decimal("25.00")

    def test_second_cancel_fails_without_double_restore(self, session, placed):
        order_id, a_id, b_id = placed
        cancel_order(session, order_id)

        with pytest.raises(CannotCancelError) as exc_info:
            cancel_order(session, order_id)

        assert exc_info.value.message == (
            "Cannot cancel order with status 'Cancelled'. Only pending orders can be cancelled."
        )
        assert stock_of(session, a_id) == 5
        assert stock_of(session, b_id) == 1

    def test_confirmed_order_cannot_be_cancelled_by_customer(self, session, placed):
        order_id, a_id, _ = placed
        update_status(session, order_id, OrderStatus.CONFIRMED)

        with pytest.raises(CannotCancelError):
            cancel_order(session, order_id)

        assert session.get(Order, order_id, populate_existing=True).status == OrderStatus.CONFIRMED
        assert stock_of(session, a_id) == 3

    def test_missing_order(self, session):
        with pytest.raises(OrderNotFoundError):
            cancel_order(session, 123)

    def test_concurrent_cancel_restores_once(self, engine, session, placed):
        """A second request that read the order as Pending loses the race."""
        order_id, a_id, _ = placed

        with Session(engine) as other:
            stale = other.get(Order, order_id)
            assert stale.status == OrderStatus.PENDING

            cancel_order(session, order_id)

            with pytest.raises(CannotCancelError) as exc_info:
                cancel_order(other, order_id)

        assert exc_info.value.current_status == OrderStatus.CANCELLED
        assert stock_of(session, a_id) == 5


class TestStatusChangeFailures:

    def test_restock_failure_leaves_order_pending(self, session, placed, monkeypatch):
        order_id, a_id, _ = placed

        def broken_restore(session, order_id):
            raise RuntimeError("release failed")

        monkeypatch.setattr(order_lifecycle, "restore_stock", broken_restore)

        with pytest.raises(UnexpectedError):
            cancel_order(session, order_id)

        assert session.get(Order, order_id, populate_existing=True).status == OrderStatus.PENDING
        assert stock_of(session, a_id) == 3

    def test_order_deleted_mid_change(self, engine, session, placed):
        order_id, _, _ = placed

        with Session(engine) as other:
            assert other.get(Order, order_id).status == OrderStatus.PENDING

            session.delete(session.get(Order, order_id))
            session.commit()

            with pytest.raises(OrderNotFoundError):
                cancel_order(other, order_id)
