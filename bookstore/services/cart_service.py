# bookstore/services/cart_service.py
from sqlalchemy.orm import Session

from bookstore.data.models.cart import CartModel
from bookstore.domain.errors import BookNotFound, CartNotFound, CartLineNotFound
from bookstore.domain.schemas import CartView, CartBookView
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.cart_repo import CartRepo
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


def to_cart_view(cart: CartModel) -> CartView:
    return CartView(
        id=cart.id,
        user_id=cart.user_id,
        books=[
            CartBookView(
                book_id=i.book_id,
                title=i.book.title,
                author=i.book.author,
                description=i.book.description,
                price=i.book.price,
                in_stock=i.book.in_stock,
                quantity=i.quantity,
            )
            for i in cart.items
        ],
    )


class CartService:
    """
    Per-user basket of (book, quantity) lines.
    Commands (add, remove, update, clear) change state, queries (get) only read.
    A cart is provisioned on the first add and never deleted when emptied.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.books = BookRepo(db)

    # query
    def get_cart(self, cart_id: int) -> CartView:
        cart = self.repo.get_cart(cart_id)
        if not cart:
            raise CartNotFound()
        return to_cart_view(cart)

    def get_user_cart(self, user_id: int) -> CartView:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()
        return to_cart_view(cart)

    # commands
    def add_to_cart(self, user_id: int, book_id: int, quantity: int) -> None:
        try:
            cart = self.repo.get_cart_by_user(user_id)
            if not cart:
                cart = self.repo.create_cart(CartModel(user_id=user_id))
                logger.info(f"Created cart {cart.id} for user {user_id}")

            if not self.books.get_book(book_id):
                raise BookNotFound()

            # duplicate adds merge into the existing line
            self.repo.increment_item(cart.id, book_id, quantity)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Added book {book_id} x{quantity} to cart of user {user_id}")

    def remove_from_cart(self, user_id: int, book_id: int) -> None:
        cart = self._require_cart(user_id)

        if self.repo.delete_cart_item(cart.id, book_id) == 0:
            self.repo.rollback()
            raise CartLineNotFound()

        self.repo.commit()
        logger.info(f"Removed book {book_id} from cart {cart.id}")

    def update_quantity(self, user_id: int, book_id: int, quantity: int) -> None:
        cart = self._require_cart(user_id)

        item = self.repo.get_cart_item(cart.id, book_id)
        if not item:
            raise CartLineNotFound()

        # overwrite, not merge
        item.quantity = quantity
        self.repo.commit()
        logger.info(f"Set quantity of book {book_id} in cart {cart.id} to {quantity}")

    def clear_cart(self, user_id: int) -> None:
        cart = self._require_cart(user_id)

        removed = self.repo.clear_items(cart.id)
        self.repo.commit()
        logger.info(f"Cleared cart {cart.id} ({removed} lines)")

    def _require_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFound()
        return cart
