# bookstore/repos/order_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from bookstore.data.models.order import OrderModel


def _with_items(stmt):
    return stmt.options(selectinload(OrderModel.items))


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            _with_items(select(OrderModel)).where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def get_orders_by_user(self, user_id: int) -> list[OrderModel]:
        return list(self.db.execute(
            _with_items(select(OrderModel))
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.id)
        ).scalars().all())

    def get_orders_by_status(self, status: str) -> list[OrderModel]:
        return list(self.db.execute(
            _with_items(select(OrderModel))
            .where(func.lower(OrderModel.status) == status.lower())
            .order_by(OrderModel.id)
        ).scalars().all())

    def update_order_status(self, order: OrderModel, status: str) -> OrderModel:
        order.status = status
        self.db.flush()
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
