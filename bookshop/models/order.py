from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from bookshop.constants.order_status import OrderStatus


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    order_date: datetime = Field(default_factory=datetime.utcnow)
    total_price: Decimal = Field(max_digits=18, decimal_places=2)

    status: OrderStatus = Field(default=OrderStatus.PENDING, index=True)

    created_date: datetime = Field(default_factory=datetime.utcnow)
