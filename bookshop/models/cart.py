from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

class CartItem(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_cartitem_user_book"),
        CheckConstraint("quantity >= 1", name="ck_cartitem_quantity_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    book_id: int = Field(foreign_key="book.id")
    quantity: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)
