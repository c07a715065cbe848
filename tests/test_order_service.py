from decimal import Decimal

import pytest
from kombu.exceptions import OperationalError
from sqlalchemy import select, func

from bookstore.data.models import OrderModel, BookModel, CartItemModel
from bookstore.domain.errors import EmptyCart, OrderNotFound, OrderCancelForbidden
from bookstore.domain.roles import Role
from bookstore.services.cart_service import CartService
from bookstore.services.notification_service import send_order_notification_task
from bookstore.services.order_service import OrderService
from bookstore.services.user_service import UserService
from tests.conftest import RecordingNotifier


@pytest.fixture
def placed_order(order_service, cart_service, make_user, make_book):
    user = make_user()
    book = make_book(price="30.00")
    cart_service.add_to_cart(user.id, book.id, 2)
    return order_service.create_order(user.id, "123 Main St")


def test_checkout_scenario(user_service, cart_service, order_service, make_book):
    alice = user_service.register("alice", "pw", "a@x.com")
    assert alice.role == Role.ADMIN.value

    b1 = make_book(title="B1", price="10")
    b2 = make_book(title="B2", price="20")
    cart_service.add_to_cart(alice.id, b1.id, 2)
    cart_service.add_to_cart(alice.id, b2.id, 1)

    order = order_service.create_order(alice.id, "Main St")

    assert order.total == Decimal("40.00")
    assert order.status == "pending"
    assert order.address == "Main St"
    assert [(b.title, b.quantity, b.price) for b in order.books] == [
        ("B1", 2, Decimal("10.00")),
        ("B2", 1, Decimal("20.00")),
    ]
    assert cart_service.get_user_cart(alice.id).books == []


def test_empty_cart_creates_no_order(order_service, cart_service, make_user, make_book, db):
    user = make_user()

    with pytest.raises(EmptyCart):
        order_service.create_order(user.id, "nowhere")

    book = make_book()
    cart_service.add_to_cart(user.id, book.id, 1)
    cart_service.clear_cart(user.id)

    with pytest.raises(EmptyCart):
        order_service.create_order(user.id, "nowhere")

    assert db.execute(select(func.count(OrderModel.id))).scalar_one() == 0


def test_price_snapshot_survives_catalog_change(placed_order, order_service, db):
    book = db.get(BookModel, placed_order.books[0].book_id)
    book.price = Decimal("99.99")
    book.title = "Renamed"
    db.commit()

    order = order_service.get_order(placed_order.id)
    assert order.total == Decimal("60.00")
    assert order.books[0].price == Decimal("30.00")


def test_failed_consolidation_rolls_back(order_service, cart_service, make_user, make_book, db, monkeypatch):
    user = make_user()
    book = make_book()
    cart_service.add_to_cart(user.id, book.id, 3)

    def boom(cart_id, item_ids):
        raise RuntimeError("store down")

    monkeypatch.setattr(order_service.carts, "delete_items", boom)

    with pytest.raises(RuntimeError):
        order_service.create_order(user.id, "Main St")

    assert db.execute(select(func.count(OrderModel.id))).scalar_one() == 0
    assert cart_service.get_user_cart(user.id).books[0].quantity == 3


def test_create_order_notifies(placed_order, notifier):
    assert notifier.events == [("created", placed_order.user_id, placed_order.id, "60.00")]


@pytest.mark.parametrize("status", ["pending", "approved"])
def test_cancel_allowed(placed_order, order_service, status):
    order_service.update_status(placed_order.id, status)

    order_service.cancel_order(placed_order.id)

    assert order_service.get_order(placed_order.id).status == "cancelled"


@pytest.mark.parametrize("status", ["shipped", "cancelled"])
def test_cancel_forbidden(placed_order, order_service, status):
    order_service.update_status(placed_order.id, status)

    with pytest.raises(OrderCancelForbidden):
        order_service.cancel_order(placed_order.id)

    assert order_service.get_order(placed_order.id).status == status


def test_cancel_unknown_order(order_service):
    with pytest.raises(OrderNotFound):
        order_service.cancel_order(9999)


def test_get_order_unknown(order_service):
    with pytest.raises(OrderNotFound):
        order_service.get_order(9999)


def test_update_status_is_unconditional(placed_order, order_service, notifier):
    order_service.update_status(placed_order.id, "shipped")
    order_service.update_status(placed_order.id, "on-hold")

    assert order_service.get_order(placed_order.id).status == "on-hold"
    assert notifier.events[-1] == ("status", placed_order.user_id, placed_order.id, "on-hold")

    with pytest.raises(OrderNotFound):
        order_service.update_status(9999, "shipped")


def test_list_queries(order_service, cart_service, make_user, make_book):
    u1, u2 = make_user(), make_user()
    book = make_book()

    cart_service.add_to_cart(u1.id, book.id, 1)
    first = order_service.create_order(u1.id, "a")
    cart_service.add_to_cart(u1.id, book.id, 1)
    second = order_service.create_order(u1.id, "b")

    assert [o.id for o in order_service.get_user_orders(u1.id)] == [first.id, second.id]
    assert order_service.get_user_orders(u2.id) == []

    order_service.update_status(second.id, "Approved")
    assert [o.id for o in order_service.get_orders_by_status("APPROVED")] == [second.id]
    assert [o.id for o in order_service.get_orders_by_status("pending")] == [first.id]
    assert order_service.get_orders_by_status("shipped") == []


def test_runs_notification_task_eagerly(db, cart_service, make_user, make_book):
    # default notifier goes through celery, eager in tests
    svc = OrderService(db)
    user = make_user()
    cart_service.add_to_cart(user.id, make_book().id, 1)

    order = svc.create_order(user.id, "Main St")
    svc.cancel_order(order.id)

    assert svc.get_order(order.id).status == "cancelled"


def test_concurrent_checkout_of_one_cart_places_one_order(file_sessions, hasher, monkeypatch):
    setup = file_sessions()
    user = UserService(setup, hasher=hasher).register("alice", "pw", "a@x.com")
    book = BookModel(title="B1", author="A", description="d", price=Decimal("10.00"), in_stock=True)
    setup.add(book)
    setup.commit()
    CartService(setup).add_to_cart(user.id, book.id, 2)

    first = OrderService(file_sessions(), notifier=RecordingNotifier())
    second = OrderService(file_sessions(), notifier=RecordingNotifier())
    placed = []
    read_cart = first.carts.get_cart_by_user

    def read_then_lose_race(user_id, lock=False):
        cart = read_cart(user_id, lock=lock)
        # the other checkout runs to completion between our read and our write
        placed.append(second.create_order(user_id, "Second St"))
        return cart

    monkeypatch.setattr(first.carts, "get_cart_by_user", read_then_lose_race)

    with pytest.raises(EmptyCart):
        first.create_order(user.id, "First St")

    check = file_sessions()
    orders = check.execute(select(OrderModel)).scalars().all()
    assert [o.id for o in orders] == [placed[0].id]
    assert orders[0].total == Decimal("20.00")
    assert first.notifier.events == []
    assert CartService(check).get_user_cart(user.id).books == []


def test_line_added_during_checkout_stays_in_cart(order_service, cart_service, make_user, make_book, db, monkeypatch):
    user = make_user()
    b1 = make_book(title="B1")
    b2 = make_book(title="B2")
    cart_service.add_to_cart(user.id, b1.id, 1)
    read_cart = order_service.carts.get_cart_by_user

    def read_then_add(user_id, lock=False):
        cart = read_cart(user_id, lock=lock)
        db.add(CartItemModel(cart_id=cart.id, book_id=b2.id, quantity=4))
        db.flush()
        return cart

    monkeypatch.setattr(order_service.carts, "get_cart_by_user", read_then_add)

    order = order_service.create_order(user.id, "Main St")

    assert [b.book_id for b in order.books] == [b1.id]
    assert [(b.book_id, b.quantity) for b in cart_service.get_user_cart(user.id).books] == [(b2.id, 4)]


def test_broker_outage_does_not_fail_committed_order(db, cart_service, make_user, make_book, monkeypatch):
    def broker_down(*args, **kwargs):
        raise OperationalError("Error 111 connecting to redis:6379. Connection refused.")

    monkeypatch.setattr(send_order_notification_task, "delay", broker_down)
    svc = OrderService(db)
    user = make_user()
    cart_service.add_to_cart(user.id, make_book(price="12.50").id, 2)

    order = svc.create_order(user.id, "Main St")
    svc.update_status(order.id, "approved")

    assert order.total == Decimal("25.00")
    assert svc.get_order(order.id).status == "approved"
    assert cart_service.get_user_cart(user.id).books == []
