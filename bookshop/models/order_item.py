from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from decimal import Decimal


class OrderItem(SQLModel, table=True):
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_orderitem_quantity_positive"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    book_id: int = Field(foreign_key="book.id")

    book_title: str
    unit_price: Decimal = Field(max_digits=18, decimal_places=2)  # price at order time
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity
