# bookstore/services/user_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.data.models.user import UserModel, UserDetailsModel
from bookstore.domain.errors import (
    EmptyFields,
    UsernameExists,
    EmailExists,
    InvalidCredentials,
    UserNotFound,
    DetailsExist,
)
from bookstore.domain.roles import Role
from bookstore.domain.schemas import UserView
from bookstore.repos.user_repo import UserRepo
from bookstore.services.auth_service import TokenService, PasswordHasher
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(
        self,
        db: Session,
        tokens: TokenService | None = None,
        hasher: PasswordHasher | None = None,
    ):
        self.repo = UserRepo(db)
        self.tokens = tokens or TokenService()
        self.hasher = hasher or PasswordHasher()

    def register(self, username: str, password: str, email: str) -> UserView:
        if not username or not password or not email:
            raise EmptyFields()

        self._check_taken(username, email)

        password_hash = self.hasher.hash(password)
        # the very first account bootstraps the admin
        claim_admin = not self.repo.users_exist()

        try:
            user = self._insert(username, email, password_hash, claim_admin)
        except IntegrityError:
            if not claim_admin:
                raise
            # a concurrent first registration holds the admin claim
            logger.info(f"Admin already claimed, registering {username} as user")
            user = self._insert(username, email, password_hash, claim_admin=False)

        logger.info(f"Registered user {user.id} ({username}) as {user.role}")
        return self._to_view(user)

    def _insert(self, username: str, email: str, password_hash: str, claim_admin: bool) -> UserModel:
        role = Role.ADMIN if claim_admin else Role.USER
        try:
            return self.repo.create_user(
                UserModel(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    role=role.value,
                ),
                claim_admin=claim_admin,
            )
        except IntegrityError:
            # lost a unique index to a concurrent registration
            self._check_taken(username, email)
            raise

    def _check_taken(self, username: str, email: str) -> None:
        if self.repo.get_by_username(username):
            raise UsernameExists()
        if self.repo.get_by_email(email):
            raise EmailExists()

    def login(self, username: str, password: str) -> str:
        if not username or not password:
            raise EmptyFields()

        user = self.repo.get_by_username(username)
        if not user:
            self.hasher.dummy_verify()
            raise InvalidCredentials()

        if not self.hasher.verify(password, user.password_hash):
            logger.warning(f"Failed login for {username}")
            raise InvalidCredentials()

        logger.info(f"User {user.id} logged in")
        return self.tokens.issue(user.id, user.username, Role(user.role))

    def create_details(self, user_id: int, full_name: str, phone_number: str) -> UserView:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound()

        if not full_name or not phone_number:
            raise EmptyFields()

        if user.details is not None:
            raise DetailsExist()

        self.repo.create_details(
            UserDetailsModel(user_id=user_id, full_name=full_name, phone_number=phone_number)
        )
        return self.get_user(user_id)

    def get_user(self, user_id: int) -> UserView:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound()
        return self._to_view(user)

    @staticmethod
    def _to_view(user: UserModel) -> UserView:
        details = user.details
        return UserView(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            full_name=details.full_name if details else "",
            phone_number=details.phone_number if details else "",
        )
