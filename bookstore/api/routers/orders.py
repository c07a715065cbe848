# bookstore/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookstore.api.deps import get_db, require_roles
from bookstore.domain.roles import ANY_ROLE, ADMIN_ONLY
from bookstore.domain.schemas import OrderCreate, OrderView, StatusUpdate, MessageOut
from bookstore.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

any_role = [Depends(require_roles(*ANY_ROLE))]


def get_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("/users/{user_id}", response_model=OrderView, status_code=201, dependencies=any_role)
def create_order(user_id: int, payload: OrderCreate, svc: OrderService = Depends(get_service)):
    """Turns the user's cart into a pending order and empties the cart."""
    return svc.create_order(user_id, payload.address)


@router.get("/users/{user_id}", response_model=List[OrderView], dependencies=any_role)
def get_user_orders(user_id: int, svc: OrderService = Depends(get_service)):
    return svc.get_user_orders(user_id)


@router.get("", response_model=List[OrderView], dependencies=any_role)
def get_orders_by_status(status: str = Query(..., min_length=1), svc: OrderService = Depends(get_service)):
    return svc.get_orders_by_status(status)


@router.get("/{order_id}", response_model=OrderView, dependencies=any_role)
def get_order(order_id: int, svc: OrderService = Depends(get_service)):
    return svc.get_order(order_id)


@router.post("/{order_id}/cancel", response_model=MessageOut, dependencies=any_role)
def cancel_order(order_id: int, svc: OrderService = Depends(get_service)):
    svc.cancel_order(order_id)
    return MessageOut(message="Order cancelled!")


@router.patch("/{order_id}/status", response_model=MessageOut, dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def update_status(order_id: int, payload: StatusUpdate, svc: OrderService = Depends(get_service)):
    svc.update_status(order_id, payload.status)
    return MessageOut(message="Order status updated!")
