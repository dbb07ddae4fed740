from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Book(SQLModel, table=True):
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_book_stock_non_negative"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    isbn: Optional[str] = None

    #Shop Details
    price: Decimal = Field(default=Decimal("0.00"), max_digits=18, decimal_places=2)
    stock: int = Field(default=0)  # only changed through services.stock_ledger
    is_active: bool = True

    created_at: datetime = Field(default_factory=datetime.utcnow)
