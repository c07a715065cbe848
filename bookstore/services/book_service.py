# bookstore/services/book_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from bookstore.data.models.book import BookModel
from bookstore.domain.errors import EmptyFields, BookNotFound
from bookstore.domain.schemas import BookView
from bookstore.repos.book_repo import BookRepo
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


class BookService:
    """Catalog. Stock is a flag toggled by hand, orders never touch it."""

    def __init__(self, db: Session):
        self.repo = BookRepo(db)

    def create_book(self, title: str, author: str, description: str, price: Decimal | None) -> BookView:
        if not title or not author or not description or price is None:
            raise EmptyFields()

        book = self.repo.create_book(
            BookModel(
                title=title,
                author=author,
                description=description,
                price=price,
                in_stock=True,
            )
        )
        logger.info(f"Created book {book.id} '{title}'")
        return BookView.model_validate(book)

    def get_by_title(self, title: str) -> BookView:
        book = self.repo.get_by_title(title)
        if not book:
            raise BookNotFound()
        return BookView.model_validate(book)

    def get_books(self) -> list[BookView]:
        return [BookView.model_validate(b) for b in self.repo.get_books()]

    def get_books_by_author(self, author: str) -> list[BookView]:
        return [BookView.model_validate(b) for b in self.repo.get_by_author(author)]

    def update_stock(self, book_id: int) -> BookView:
        book = self.repo.get_book(book_id)
        if not book:
            raise BookNotFound()

        book.in_stock = not book.in_stock
        self.repo.save(book)
        logger.info(f"Book {book_id} in_stock={book.in_stock}")
        return BookView.model_validate(book)
