from datetime import datetime
from decimal import Decimal

from bookshop.constants.order_status import OrderStatus
from bookshop.schemas.common import CamelModel


class CheckoutRequest(CamelModel):
    user_id: int


class OrderSummary(CamelModel):
    id: int
    user_id: int
    order_date: datetime
    total_price: Decimal
    status: OrderStatus
    item_count: int          # total quantity across all lines
