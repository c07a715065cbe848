# bookstore/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import Session, selectinload

from bookstore.data.models.cart import CartModel
from bookstore.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .options(selectinload(CartModel.items).selectinload(CartItemModel.book))
            .where(CartModel.id == cart_id)
        ).scalar_one_or_none()

    def get_cart_by_user(self, user_id: int, lock: bool = False) -> CartModel | None:
        stmt = (
            select(CartModel)
            .options(selectinload(CartModel.items).selectinload(CartItemModel.book))
            .where(CartModel.user_id == user_id)
        )
        if lock:
            # row lock held until commit/rollback, sqlite ignores FOR UPDATE
            stmt = stmt.with_for_update(of=CartModel)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart_id: int, book_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.book_id == book_id,
            )
        ).scalar_one_or_none()

    def increment_item(self, cart_id: int, book_id: int, quantity: int) -> None:
        """
        Insert-or-increment of a cart line as one statement.
        Relies on the u_cart_book unique constraint.
        """
        insert = self._dialect_insert()
        if insert is None:
            # no native upsert on this dialect
            item = self.get_cart_item(cart_id, book_id)
            if item:
                item.quantity += quantity
            else:
                self.db.add(CartItemModel(cart_id=cart_id, book_id=book_id, quantity=quantity))
            self.db.flush()
            return

        stmt = insert(CartItemModel).values(cart_id=cart_id, book_id=book_id, quantity=quantity)
        stmt = stmt.on_conflict_do_update(
            index_elements=["cart_id", "book_id"],
            set_={"quantity": CartItemModel.quantity + stmt.excluded.quantity},
        )
        self.db.execute(stmt)
        # identity map may hold the old quantity
        self.db.expire_all()

    def delete_cart_item(self, cart_id: int, book_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.book_id == book_id,
            )
        )
        self.db.expire_all()
        return result.rowcount

    def delete_items(self, cart_id: int, item_ids: list[int]) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.id.in_(item_ids),
            )
        )
        self.db.expire_all()
        return result.rowcount

    def clear_items(self, cart_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.cart_id == cart_id)
        )
        self.db.expire_all()
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def _dialect_insert(self):
        name = self.db.get_bind().dialect.name
        if name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
            return insert
        if name == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
            return insert
        return None
