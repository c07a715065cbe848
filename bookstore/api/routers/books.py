# bookstore/api/routers/books.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bookstore.api.deps import get_db, require_roles
from bookstore.domain.roles import ANY_ROLE, ADMIN_ONLY
from bookstore.domain.schemas import BookIn, BookView
from bookstore.services.book_service import BookService

router = APIRouter(prefix="/books", tags=["books"])


def get_service(db: Session = Depends(get_db)) -> BookService:
    return BookService(db)


@router.post("", response_model=BookView, status_code=201, dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def create_book(payload: BookIn, svc: BookService = Depends(get_service)):
    return svc.create_book(payload.title, payload.author, payload.description, payload.price)


@router.get("", response_model=List[BookView], dependencies=[Depends(require_roles(*ANY_ROLE))])
def get_books(author: str | None = Query(None), svc: BookService = Depends(get_service)):
    if author:
        return svc.get_books_by_author(author)
    return svc.get_books()


@router.get("/search", response_model=BookView, dependencies=[Depends(require_roles(*ANY_ROLE))])
def get_by_title(title: str = Query(..., min_length=1), svc: BookService = Depends(get_service)):
    return svc.get_by_title(title)


@router.patch("/{book_id}/stock", response_model=BookView, dependencies=[Depends(require_roles(*ADMIN_ONLY))])
def update_stock(book_id: int, svc: BookService = Depends(get_service)):
    return svc.update_stock(book_id)
