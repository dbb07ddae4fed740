"""Errors raised by the checkout and order services.

Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. ``bookshop.main`` renders them as ``{"detail": ...}``.
"""


class BookshopError(Exception):
    """Base class for all service errors."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptyCartError(BookshopError):

    def __init__(self) -> None:
        super().__init__("Cart is empty. Add items before checkout.")


class InsufficientStockError(BookshopError):

    def __init__(self, book_id: int, title: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for '{title}'. "
            f"Available: {available}, Requested: {requested}"
        )
        self.book_id = book_id
        self.title = title
        self.available = available
        self.requested = requested


class CartStockError(BookshopError):
    """Cart quantity would exceed what is on the shelf."""


class CartItemNotFoundError(BookshopError):
    status_code = 404

    def __init__(self, user_id: int, book_id: int) -> None:
        super().__init__("Cart item not found")
        self.user_id = user_id
        self.book_id = book_id


class BookNotFoundError(BookshopError):
    status_code = 404

    def __init__(self, book_id: int) -> None:
        super().__init__(f"Book with ID {book_id} not found.")
        self.book_id = book_id


class UserNotFoundError(BookshopError):
    status_code = 404

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with ID {user_id} not found.")
        self.user_id = user_id


class InactiveUserError(BookshopError):
    status_code = 403

    def __init__(self, user_id: int) -> None:
        super().__init__("User account is disabled")
        self.user_id = user_id


class OrderNotFoundError(BookshopError):
    status_code = 404

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order with ID {order_id} not found.")
        self.order_id = order_id


class InvalidStatusTransitionError(BookshopError):

    def __init__(self, current, new) -> None:
        super().__init__(
            f"Invalid status transition from {current.value} to {new.value}"
        )
        self.current = current
        self.new = new


class CannotCancelError(BookshopError):

    def __init__(self, current_status) -> None:
        super().__init__(
            f"Cannot cancel order with status '{current_status.value}'. "
            f"Only pending orders can be cancelled."
        )
        self.current_status = current_status


class PaymentNotFoundError(BookshopError):
    status_code = 404

    def __init__(self, order_id: int) -> None:
        super().__init__("Payment not found")
        self.order_id = order_id


class PaymentError(BookshopError):
    """The payment gateway refused or failed the request."""


class UnexpectedError(BookshopError):
    status_code = 500

    def __init__(self) -> None:
        super().__init__("Internal server error")
