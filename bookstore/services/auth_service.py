# bookstore/services/auth_service.py
"""
Identity tokens and password hashing.

Tokens are HS256 JWTs carrying {sub, username, role, iat, exp}. There is no
revocation list: expiry is the only lifetime bound.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable

import jwt
from passlib.context import CryptContext

from bookstore.domain.errors import Unauthenticated, Forbidden
from bookstore.domain.roles import Role
from bookstore.utils.settings import JWT_SECRET, JWT_ALGORITHM, TOKEN_TTL_SECONDS
from bookstore.utils.logging import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    subject: int
    username: str
    role: Role
    expires_at: datetime


class TokenService:
    def __init__(
        self,
        secret: str = JWT_SECRET,
        ttl: timedelta = timedelta(seconds=TOKEN_TTL_SECONDS),
        clock: Callable[[], datetime] = utc_now,
        algorithm: str = JWT_ALGORITHM,
    ):
        if not secret:
            raise RuntimeError("JWT_SECRET is not set")
        self.secret = secret
        self.ttl = ttl
        self.clock = clock
        self.algorithm = algorithm

    def issue(self, subject: int, username: str, role: Role) -> str:
        now = self.clock()
        claims = {
            "sub": str(subject),
            "username": username,
            "role": role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> TokenClaims:
        if not token:
            raise Unauthenticated("missing authorization header")

        try:
            # only the configured algorithm is accepted, "none" and others fail here
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token rejected: {e.__class__.__name__}")
            raise Unauthenticated() from e

        # expiry checked against the injected clock, not the wall clock
        if payload["exp"] <= int(self.clock().timestamp()):
            logger.warning("Token rejected: expired")
            raise Unauthenticated("token expired")

        role = Role.from_claim(payload.get("role"))
        if role is None:
            raise Unauthenticated("invalid token claims")

        try:
            subject = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise Unauthenticated("invalid token claims") from e

        return TokenClaims(
            subject=subject,
            username=str(payload.get("username", "")),
            role=role,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def authorize(self, token: str | None, allowed_roles: Iterable[Role]) -> TokenClaims:
        """Verify the token, then check its role against the allowed set."""
        claims = self.verify(token)
        allowed = frozenset(allowed_roles)
        if allowed and claims.role not in allowed:
            logger.warning(f"User {claims.username} with role {claims.role.value} denied")
            raise Forbidden()
        return claims


class PasswordHasher:
    """Salted password hashes; verification is constant-time."""

    def __init__(self, schemes: list[str] | None = None):
        self.context = CryptContext(schemes=schemes or ["argon2"], deprecated="auto")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self.context.verify(password, password_hash)

    def dummy_verify(self) -> None:
        # equalize timing when the username does not exist
        self.context.dummy_verify()
