# bookstore/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bookstore.api.routers import health, home, users, books, carts, orders, reviews
from bookstore.domain.errors import BookstoreError
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


async def bookstore_error_handler(request: Request, exc: BookstoreError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    # store failures are not recovered, the client only sees a generic fault
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "internal server error"})


def create_app(lifespan=None) -> FastAPI:
    app = FastAPI(title="Bookstore API", version="1.0.0", lifespan=lifespan)

    app.add_exception_handler(BookstoreError, bookstore_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    app.include_router(health.router)
    app.include_router(home.router)
    app.include_router(users.router)
    app.include_router(books.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(reviews.router)

    return app
