from bookshop.models.user import User
from bookshop.models.book import Book
from bookshop.models.cart import CartItem
from bookshop.models.order import Order
from bookshop.models.order_item import OrderItem
from bookshop.models.payment import Payment

# add ALL models here
