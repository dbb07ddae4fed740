from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from bookshop.constants.order_status import PaymentStatus


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    order_id: int = Field(foreign_key="order.id", index=True)

    amount: Decimal = Field(max_digits=18, decimal_places=2)
    status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    method: str = Field(default="card")

    intent_id: Optional[str] = Field(default=None, index=True)
    client_secret: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
