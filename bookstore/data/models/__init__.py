# all models imported here so they register in Base.metadata

from bookstore.data.models.user import UserModel, UserDetailsModel, AdminBootstrapModel
from bookstore.data.models.book import BookModel
from bookstore.data.models.cart import CartModel
from bookstore.data.models.cart_item import CartItemModel
from bookstore.data.models.order import OrderModel
from bookstore.data.models.order_item import OrderItemModel
from bookstore.data.models.review import ReviewModel

__all__ = [
    "UserModel",
    "UserDetailsModel",
    "AdminBootstrapModel",
    "BookModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "ReviewModel",
]
