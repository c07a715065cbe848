# bookstore/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import get_db, require_roles
from bookstore.domain.roles import ANY_ROLE
from bookstore.domain.schemas import CartLineIn, CartView, MessageOut
from bookstore.services.cart_service import CartService

router = APIRouter(
    prefix="/carts",
    tags=["carts"],
    dependencies=[Depends(require_roles(*ANY_ROLE))],
)


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


@router.post("/users/{user_id}/books/{book_id}", response_model=MessageOut, status_code=201)
def add_to_cart(user_id: int, book_id: int, payload: CartLineIn, svc: CartService = Depends(get_service)):
    svc.add_to_cart(user_id, book_id, payload.quantity)
    return MessageOut(message="Book added to cart!")


@router.patch("/users/{user_id}/books/{book_id}", response_model=MessageOut)
def update_quantity(user_id: int, book_id: int, payload: CartLineIn, svc: CartService = Depends(get_service)):
    svc.update_quantity(user_id, book_id, payload.quantity)
    return MessageOut(message="Book quantity updated!")


@router.delete("/users/{user_id}/books/{book_id}", response_model=MessageOut)
def remove_from_cart(user_id: int, book_id: int, svc: CartService = Depends(get_service)):
    svc.remove_from_cart(user_id, book_id)
    return MessageOut(message="Book removed from cart!")


@router.delete("/users/{user_id}/books", response_model=MessageOut)
def clear_cart(user_id: int, svc: CartService = Depends(get_service)):
    svc.clear_cart(user_id)
    return MessageOut(message="Cart has been cleared!")


@router.get("/users/{user_id}", response_model=CartView)
def get_user_cart(user_id: int, svc: CartService = Depends(get_service)):
    return svc.get_user_cart(user_id)


@router.get("/{cart_id}", response_model=CartView)
def get_cart(cart_id: int, svc: CartService = Depends(get_service)):
    return svc.get_cart(cart_id)
