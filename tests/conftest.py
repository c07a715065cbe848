import os

# settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.api import create_app
from bookstore.api.deps import get_token_service, get_password_hasher
from bookstore.data import models  # noqa: F401
from bookstore.data.database import Base, get_db
from bookstore.data.models import BookModel
from bookstore.domain.roles import Role
from bookstore.services.auth_service import TokenService, PasswordHasher
from bookstore.services.book_service import BookService
from bookstore.services.cart_service import CartService
from bookstore.services.order_service import OrderService
from bookstore.services.review_service import ReviewService
from bookstore.services.user_service import UserService

SECRET = os.environ["JWT_SECRET"]


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def order_created(self, user_id, order_id, total):
        self.events.append(("created", user_id, order_id, total))

    def order_status_changed(self, user_id, order_id, status):
        self.events.append(("status", user_id, order_id, status))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_conn, _record):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_sessions(tmp_path):
    """
    Sessions on a file-backed SQLite database, each with its own connection,
    for interleaving two transactions.
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'bookstore.db'}")

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_conn, _record):
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False)
    opened = []

    def _open():
        session = factory()
        opened.append(session)
        return session

    yield _open
    for session in opened:
        session.close()
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture
def tokens(clock):
    return TokenService(secret=SECRET, clock=clock)


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def user_service(db, tokens, hasher):
    return UserService(db, tokens=tokens, hasher=hasher)


@pytest.fixture
def book_service(db):
    return BookService(db)


@pytest.fixture
def cart_service(db):
    return CartService(db)


@pytest.fixture
def order_service(db, notifier):
    return OrderService(db, notifier=notifier)


@pytest.fixture
def review_service(db):
    return ReviewService(db)


@pytest.fixture
def make_user(user_service):
    counter = {"n": 0}

    def _make(username=None, password="pw", email=None):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        email = email or f"{username}@example.com"
        return user_service.register(username, password, email)

    return _make


@pytest.fixture
def make_book(db):
    def _make(title="Crime and Punishment", author="Dostoevsky", price="10.00", description="novel"):
        book = BookModel(
            title=title,
            author=author,
            description=description,
            price=Decimal(price),
            in_stock=True,
        )
        db.add(book)
        db.commit()
        return book

    return _make


@pytest.fixture
def client(session_factory, tokens, hasher):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_token_service] = lambda: tokens
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_header(tokens):
    def _header(user_id=1, username="alice", role=Role.ADMIN):
        return {"Authorization": f"Bearer {tokens.issue(user_id, username, role)}"}

    return _header
