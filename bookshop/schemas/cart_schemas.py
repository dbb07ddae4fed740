from decimal import Decimal
from typing import List

from pydantic import Field

from bookshop.schemas.common import CamelModel


class CartAddRequest(CamelModel):
    user_id: int
    book_id: int
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(CamelModel):
    user_id: int
    book_id: int
    quantity: int = Field(ge=1)


class CartLineOut(CamelModel):
    book_id: int
    book_title: str
    book_price: Decimal      # current price, may differ at checkout
    quantity: int
    total_price: Decimal
    available_stock: int


class CartOut(CamelModel):
    user_id: int
    items: List[CartLineOut]
    item_count: int
    subtotal: Decimal
