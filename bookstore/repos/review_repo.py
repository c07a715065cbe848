from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookstore.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int) -> ReviewModel | None:
        return self.db.get(ReviewModel, review_id)

    def get_by_user_and_book(self, user_id: int, book_id: int) -> ReviewModel | None:
        # creation does not enforce uniqueness, first match wins
        return self.db.execute(
            select(ReviewModel)
            .where(ReviewModel.user_id == user_id, ReviewModel.book_id == book_id)
            .order_by(ReviewModel.id)
            .limit(1)
        ).scalar_one_or_none()

    def get_by_book(self, book_id: int) -> list[ReviewModel]:
        return list(self.db.execute(
            select(ReviewModel)
            .options(selectinload(ReviewModel.user))
            .where(ReviewModel.book_id == book_id)
            .order_by(ReviewModel.id)
        ).scalars().all())

    def get_by_user(self, user_id: int) -> list[ReviewModel]:
        return list(self.db.execute(
            select(ReviewModel)
            .options(selectinload(ReviewModel.user), selectinload(ReviewModel.book))
            .where(ReviewModel.user_id == user_id)
            .order_by(ReviewModel.id)
        ).scalars().all())

    def create_review(self, review: ReviewModel) -> ReviewModel:
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def save(self, review: ReviewModel) -> ReviewModel:
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete_review(self, review: ReviewModel) -> None:
        self.db.delete(review)
        self.db.commit()
