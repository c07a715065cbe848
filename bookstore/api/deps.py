# bookstore/api/deps.py
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookstore.data.database import get_db
from bookstore.domain.errors import Unauthenticated
from bookstore.domain.roles import Role
from bookstore.services.auth_service import TokenService, TokenClaims, PasswordHasher

_bearer = HTTPBearer(auto_error=False)
_token_service = TokenService()
_password_hasher = PasswordHasher()


def get_token_service() -> TokenService:
    return _token_service


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def require_roles(*roles: Role):
    """
    Dependency factory guarding a route.
    Missing or bad token -> 401, role outside `roles` -> 403.
    """
    allowed = frozenset(roles)

    def dependency(
        credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
        tokens: TokenService = Depends(get_token_service),
    ) -> TokenClaims:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise Unauthenticated("missing authorization header")
        return tokens.authorize(credentials.credentials, allowed)

    return dependency
