# bookstore/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


# ---------- users ----------

class RegisterIn(BaseModel):
    """Registration payload. Blank values are rejected by the service."""

    username: str = ""
    password: str = ""
    email: str = ""


class LoginIn(BaseModel):
    username: str = ""
    password: str = ""


class TokenOut(BaseModel):
    token: str


class UserDetailsIn(BaseModel):
    full_name: str = ""
    phone_number: str = ""


class UserView(BaseModel):
    id: int
    username: str
    email: str
    role: str
    full_name: str = ""
    phone_number: str = ""

    model_config = ConfigDict(from_attributes=True)


# ---------- books ----------

class BookIn(BaseModel):
    title: str = ""
    author: str = ""
    description: str = ""
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class BookView(BaseModel):
    id: int
    title: str
    author: str
    description: str
    price: Decimal
    in_stock: bool

    model_config = ConfigDict(from_attributes=True)


# ---------- cart ----------

class CartLineIn(BaseModel):
    """Quantity for add/update. Must be > 0."""

    quantity: int = Field(..., gt=0, description="Book quantity (must be > 0)")


class CartBookView(BaseModel):
    book_id: int
    title: str
    author: str
    description: str
    price: Decimal
    in_stock: bool
    quantity: int


class CartView(BaseModel):
    id: int
    user_id: int
    books: List[CartBookView]


# ---------- orders ----------

class OrderCreate(BaseModel):
    address: str = Field(..., min_length=1, max_length=500)


class StatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=50)


class OrderBookView(BaseModel):
    book_id: int
    title: str
    author: str
    quantity: int
    # price snapshot taken when the order was placed
    price: Decimal


class OrderView(BaseModel):
    id: int
    user_id: int
    status: str
    total: Decimal
    address: str
    created_at: datetime
    books: List[OrderBookView]


# ---------- reviews ----------

class ReviewIn(BaseModel):
    text: str = ""


class ReviewView(BaseModel):
    id: int
    username: str
    text: str


class UserReviewView(BaseModel):
    id: int
    username: str
    title: str
    author: str
    text: str


class MessageOut(BaseModel):
    message: str
