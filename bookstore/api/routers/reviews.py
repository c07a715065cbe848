# bookstore/api/routers/reviews.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookstore.api.deps import get_db, require_roles
from bookstore.domain.roles import ANY_ROLE
from bookstore.domain.schemas import ReviewIn, ReviewView, UserReviewView, MessageOut
from bookstore.services.review_service import ReviewService

router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
    dependencies=[Depends(require_roles(*ANY_ROLE))],
)


def get_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.post("/users/{user_id}/books/{book_id}", response_model=ReviewView, status_code=201)
def add_review(user_id: int, book_id: int, payload: ReviewIn, svc: ReviewService = Depends(get_service)):
    return svc.add_review(user_id, book_id, payload.text)


@router.put("/users/{user_id}/books/{book_id}", response_model=MessageOut)
def update_review(user_id: int, book_id: int, payload: ReviewIn, svc: ReviewService = Depends(get_service)):
    svc.update_review(user_id, book_id, payload.text)
    return MessageOut(message="Review updated!")


@router.get("/books/{book_id}", response_model=List[ReviewView])
def get_reviews_by_book(book_id: int, svc: ReviewService = Depends(get_service)):
    return svc.get_reviews_by_book(book_id)


@router.get("/users/{user_id}", response_model=List[UserReviewView])
def get_reviews_by_user(user_id: int, svc: ReviewService = Depends(get_service)):
    return svc.get_reviews_by_user(user_id)


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(review_id: int, svc: ReviewService = Depends(get_service)):
    svc.delete_review(review_id)
    return MessageOut(message="Review deleted!")
