from sqlalchemy import select, func
from sqlalchemy.orm import Session

from bookstore.data.models.book import BookModel


class BookRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_book(self, book_id: int) -> BookModel | None:
        return self.db.get(BookModel, book_id)

    def get_by_title(self, title: str) -> BookModel | None:
        return self.db.execute(
            select(BookModel)
            .where(func.lower(BookModel.title) == title.lower())
            .order_by(BookModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def get_books(self) -> list[BookModel]:
        return list(self.db.execute(select(BookModel).order_by(BookModel.id)).scalars().all())

    def get_by_author(self, author: str) -> list[BookModel]:
        return list(self.db.execute(
            select(BookModel)
            .where(func.lower(BookModel.author) == author.lower())
            .order_by(BookModel.id)
        ).scalars().all())

    def create_book(self, book: BookModel) -> BookModel:
        self.db.add(book)
        self.db.commit()
        self.db.refresh(book)
        return book

    def save(self, book: BookModel) -> BookModel:
        self.db.commit()
        self.db.refresh(book)
        return book
