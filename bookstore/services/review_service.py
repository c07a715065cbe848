# bookstore/services/review_service.py
from sqlalchemy.orm import Session

from bookstore.data.models.review import ReviewModel
from bookstore.domain.errors import EmptyReview, UserNotFound, BookNotFound, ReviewNotFound
from bookstore.domain.schemas import ReviewView, UserReviewView
from bookstore.repos.book_repo import BookRepo
from bookstore.repos.review_repo import ReviewRepo
from bookstore.repos.user_repo import UserRepo


class ReviewService:
    def __init__(self, db: Session):
        self.repo = ReviewRepo(db)
        self.users = UserRepo(db)
        self.books = BookRepo(db)

    def add_review(self, user_id: int, book_id: int, text: str) -> ReviewView:
        if not text or not text.strip():
            raise EmptyReview()

        user = self.users.get_user(user_id)
        if not user:
            raise UserNotFound()
        if not self.books.get_book(book_id):
            raise BookNotFound()

        review = self.repo.create_review(ReviewModel(user_id=user_id, book_id=book_id, text=text))
        return ReviewView(id=review.id, username=user.username, text=review.text)

    def get_reviews_by_book(self, book_id: int) -> list[ReviewView]:
        return [
            ReviewView(id=r.id, username=r.user.username, text=r.text)
            for r in self.repo.get_by_book(book_id)
        ]

    def get_reviews_by_user(self, user_id: int) -> list[UserReviewView]:
        return [
            UserReviewView(
                id=r.id,
                username=r.user.username,
                title=r.book.title,
                author=r.book.author,
                text=r.text,
            )
            for r in self.repo.get_by_user(user_id)
        ]

    def update_review(self, user_id: int, book_id: int, text: str) -> None:
        if not text or not text.strip():
            raise EmptyReview()

        review = self.repo.get_by_user_and_book(user_id, book_id)
        if not review:
            raise ReviewNotFound()

        review.text = text
        self.repo.save(review)

    def delete_review(self, review_id: int) -> None:
        review = self.repo.get_review(review_id)
        if not review:
            raise ReviewNotFound()
        self.repo.delete_review(review)
