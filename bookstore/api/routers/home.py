# bookstore/api/routers/home.py
from fastapi import APIRouter, Depends

from bookstore.api.deps import require_roles
from bookstore.domain.roles import ANY_ROLE, ADMIN_ONLY
from bookstore.domain.schemas import MessageOut

router = APIRouter(tags=["home"])


@router.get("/user", response_model=MessageOut, dependencies=[Depends(require_roles(*ANY_ROLE))])
def user_home():
    return MessageOut(message="Welcome user!")


@router.get("/admin", response_model=MessageOut, dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def admin_home():
    return MessageOut(message="Welcome admin!")
