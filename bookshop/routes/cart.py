from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlmodel import Session

from bookshop.database import get_session
from bookshop.schemas.cart_schemas import (
    CartAddRequest,
    CartLineOut,
    CartOut,
    CartUpdateRequest,
)
from bookshop.services import cart_service

router = APIRouter()


# View Cart

@router.get("/user/{user_id}", response_model=CartOut)
def get_cart(user_id: int, session: Session = Depends(get_session)):
    items = []
    subtotal = Decimal("0.00")

    for cart_item, book in cart_service.get_cart(session, user_id):
        line_total = book.price * cart_item.quantity
        subtotal += line_total
        items.append(
            CartLineOut(
                book_id=book.id,
                book_title=book.title,
                book_price=book.price,
                quantity=cart_item.quantity,
                total_price=line_total,
                available_stock=book.stock,
            )
        )

    return CartOut(
        user_id=user_id,
        items=items,
        item_count=sum(i.quantity for i in items),
        subtotal=subtotal,
    )


# Add to Cart

@router.post("/add")
def add_to_cart(data: CartAddRequest, session: Session = Depends(get_session)):
    item = cart_service.add_to_cart(session, data.user_id, data.book_id, data.quantity)
    return {"message": "Added to cart", "bookId": item.book_id, "quantity": item.quantity}


# Update Cart

@router.put("/update")
def update_cart_item(data: CartUpdateRequest, session: Session = Depends(get_session)):
    item = cart_service.update_cart_item(session, data.user_id, data.book_id, data.quantity)
    return {"message": "Quantity updated", "bookId": item.book_id, "quantity": item.quantity}


# Remove Cart

@router.delete("/remove/user/{user_id}/book/{book_id}")
def remove_item(user_id: int, book_id: int, session: Session = Depends(get_session)):
    cart_service.remove_cart_item(session, user_id, book_id)
    return {"message": "Item removed from cart"}


# Clear Cart

@router.delete("/clear/user/{user_id}")
def clear_cart(user_id: int, session: Session = Depends(get_session)):
    removed = cart_service.clear_cart(session, user_id)
    return {"message": "Cart cleared", "removed": removed}
