from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookstore.data.models.user import UserModel, UserDetailsModel, AdminBootstrapModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.execute(
            select(UserModel)
            .options(selectinload(UserModel.details))
            .where(UserModel.id == user_id)
        ).scalar_one_or_none()

    def get_by_username(self, username: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.username == username)
        ).scalar_one_or_none()

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def users_exist(self) -> bool:
        return self.db.execute(select(func.count(UserModel.id))).scalar_one() > 0

    def create_user(self, user: UserModel, claim_admin: bool = False) -> UserModel:
        """
        Inserts the user, and with claim_admin the single admin_bootstrap row,
        in one transaction. IntegrityError is re-raised after rollback.
        """
        try:
            self.db.add(user)
            self.db.flush()
            if claim_admin:
                self.db.add(AdminBootstrapModel(id=1, user_id=user.id))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def create_details(self, details: UserDetailsModel) -> UserDetailsModel:
        self.db.add(details)
        self.db.commit()
        self.db.refresh(details)
        return details
