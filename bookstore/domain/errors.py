# bookstore/domain/errors.py
"""
Domain errors raised by the services.

Each family carries the HTTP status the transport maps it to, so routers
never need to translate them one by one.
"""


class BookstoreError(Exception):
    status_code = 500
    message = "internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


# --- not found ---
class NotFoundError(BookstoreError):
    status_code = 404
    message = "not found"


class CartNotFound(NotFoundError):
    message = "cart not found"


class CartLineNotFound(NotFoundError):
    message = "book in cart not found"


class OrderNotFound(NotFoundError):
    message = "order not found"


class BookNotFound(NotFoundError):
    message = "book not found"


class UserNotFound(NotFoundError):
    message = "user not found"


class ReviewNotFound(NotFoundError):
    message = "review not found"


# --- conflict ---
class ConflictError(BookstoreError):
    status_code = 409
    message = "conflict"


class UsernameExists(ConflictError):
    message = "user with this username already exist"


class EmailExists(ConflictError):
    message = "user with this email already exist"


class DetailsExist(ConflictError):
    message = "user details already exist"


# --- validation ---
class ValidationError(BookstoreError):
    status_code = 400
    message = "invalid request"


class EmptyFields(ValidationError):
    message = "fields cannot be empty"


class EmptyCart(ValidationError):
    message = "cart is empty"


class EmptyReview(ValidationError):
    message = "review cannot be empty"


# --- state ---
class ForbiddenError(BookstoreError):
    status_code = 403
    message = "operation not allowed"


class OrderCancelForbidden(ForbiddenError):
    message = "order cannot be cancelled"


# --- auth ---
class AuthError(BookstoreError):
    status_code = 401
    message = "unauthenticated"


class Unauthenticated(AuthError):
    message = "invalid token"


class InvalidCredentials(AuthError):
    message = "invalid credentials"


class Forbidden(AuthError):
    status_code = 403
    message = "forbidden: insufficient permissions"
