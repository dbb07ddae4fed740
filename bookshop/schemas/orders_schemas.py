from datetime import datetime
from decimal import Decimal
from typing import List

from bookshop.constants.order_status import OrderStatus
from bookshop.schemas.checkout_schemas import OrderSummary
from bookshop.schemas.common import CamelModel


class OrderItemOut(CamelModel):
    id: int
    order_id: int
    book_id: int
    book_title: str
    quantity: int
    unit_price: Decimal      # historical price
    line_total: Decimal      # quantity * unit_price


class OrderDetail(OrderSummary):
    created_date: datetime
    items: List[OrderItemOut]


class OrderPage(CamelModel):
    total_items: int
    total_pages: int
    current_page: int
    limit: int
    results: List[OrderSummary]


class UpdateOrderStatusRequest(CamelModel):
    status: OrderStatus
