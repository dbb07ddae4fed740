from datetime import datetime
from decimal import Decimal
from typing import Optional

from bookshop.constants.order_status import PaymentStatus
from bookshop.schemas.common import CamelModel


class PaymentCreated(CamelModel):
    client_secret: str


class PaymentStatusOut(CamelModel):
    status: PaymentStatus
    amount: Decimal
    created_date: datetime
    completed_date: Optional[datetime] = None
