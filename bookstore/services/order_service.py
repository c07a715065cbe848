# bookstore/services/order_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from bookstore.data.models.order import OrderModel
from bookstore.data.models.order_item import OrderItemModel
from bookstore.domain.errors import EmptyCart, OrderNotFound, OrderCancelForbidden
from bookstore.domain.roles import OrderStatus, can_cancel
from bookstore.domain.schemas import OrderView, OrderBookView
from bookstore.repos.cart_repo import CartRepo
from bookstore.repos.order_repo import OrderRepo
from bookstore.services.notification_service import NotificationService
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


def to_order_view(order: OrderModel) -> OrderView:
    return OrderView(
        id=order.id,
        user_id=order.user_id,
        status=order.status,
        total=order.total,
        address=order.address,
        created_at=order.created_at,
        books=[
            OrderBookView(
                book_id=i.book_id,
                title=i.title,
                author=i.author,
                quantity=i.quantity,
                price=i.price,
            )
            for i in order.items
        ],
    )


class OrderService:
    """
    Order lifecycle.

    pending -> approved -> shipped | cancelled, and pending -> cancelled.
    cancel_order is guarded by that table; update_status is an
    administrative override and writes any status unchecked.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.notifier = notifier or NotificationService()

    def create_order(self, user_id: int, address: str) -> OrderView:
        """
        Cart consolidation:

        1. Loads the user's cart with its lines and books
        2. Snapshots each book (price, title, author) into an order line and sums the total
        3. Persists the order as pending
        4. Drains the cart

        Everything happens in a single transaction, rolled back on any error.
        """
        try:
            cart = self.carts.get_cart_by_user(user_id, lock=True)
            if not cart or not cart.items:
                raise EmptyCart()

            total = Decimal("0.00")
            items = []
            line_ids = []
            for line in cart.items:
                line_ids.append(line.id)
                price = line.book.price
                total += price * line.quantity
                items.append(
                    OrderItemModel(
                        book_id=line.book_id,
                        title=line.book.title,
                        author=line.book.author,
                        quantity=line.quantity,
                        price=price,
                    )
                )

            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    address=address,
                    total=total,
                    items=items,
                )
            )
            cart_id = cart.id
            # only the lines snapshotted above, a line added meanwhile stays in the cart
            drained = self.carts.delete_items(cart_id, line_ids)
            if drained != len(line_ids):
                # another checkout drained these lines first
                raise EmptyCart()

            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created from cart {cart_id}, total {total}")

        created = self.repo.get_order(order.id)
        self.notifier.order_created(user_id, created.id, str(created.total))
        return to_order_view(created)

    def cancel_order(self, order_id: int) -> None:
        order = self._require_order(order_id)

        if not can_cancel(order.status):
            raise OrderCancelForbidden()

        self.repo.update_order_status(order, OrderStatus.CANCELLED.value)
        self.repo.commit()

        logger.info(f"Order {order_id} cancelled")
        self.notifier.order_status_changed(order.user_id, order_id, OrderStatus.CANCELLED.value)

    def get_order(self, order_id: int) -> OrderView:
        return to_order_view(self._require_order(order_id))

    def get_user_orders(self, user_id: int) -> list[OrderView]:
        return [to_order_view(o) for o in self.repo.get_orders_by_user(user_id)]

    def get_orders_by_status(self, status: str) -> list[OrderView]:
        return [to_order_view(o) for o in self.repo.get_orders_by_status(status)]

    def update_status(self, order_id: int, status: str) -> None:
        order = self._require_order(order_id)

        previous = order.status
        self.repo.update_order_status(order, status)
        self.repo.commit()

        logger.info(f"Order {order_id} status {previous} -> {status}")
        self.notifier.order_status_changed(order.user_id, order_id, status)

    def _require_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound()
        return order
