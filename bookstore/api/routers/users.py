# bookstore/api/routers/users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import get_db, get_token_service, get_password_hasher, require_roles
from bookstore.domain.roles import ANY_ROLE
from bookstore.domain.schemas import RegisterIn, LoginIn, TokenOut, UserDetailsIn, UserView
from bookstore.services.auth_service import TokenService, PasswordHasher
from bookstore.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def get_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserService:
    return UserService(db, tokens=tokens, hasher=hasher)


@router.post("/register", response_model=UserView, status_code=201)
def register(payload: RegisterIn, svc: UserService = Depends(get_service)):
    return svc.register(payload.username, payload.password, payload.email)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, svc: UserService = Depends(get_service)):
    return TokenOut(token=svc.login(payload.username, payload.password))


@router.post(
    "/{user_id}/details",
    response_model=UserView,
    status_code=201,
    dependencies=[Depends(require_roles(*ANY_ROLE))],
)
def create_details(user_id: int, payload: UserDetailsIn, svc: UserService = Depends(get_service)):
    return svc.create_details(user_id, payload.full_name, payload.phone_number)


@router.get("/{user_id}", response_model=UserView, dependencies=[Depends(require_roles(*ANY_ROLE))])
def get_user(user_id: int, svc: UserService = Depends(get_service)):
    return svc.get_user(user_id)
