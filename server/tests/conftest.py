from __future__ import annotations

import os
from collections.abc import Callable, Generator
from datetime import date, time

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AUTO_CREATE_TABLES", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from badsession.auth.security import create_access_token, hash_password
from badsession.core.db import Base, get_db
from badsession.main import app
from badsession.models.play_session import PlaySession
from badsession.models.user import User

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

DEFAULT_PASSWORD = "secret123"
DEFAULT_PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient) -> Callable[[User], None]:
    def _apply(user: User) -> None:
        token = create_access_token(str(user.id), user.role, user.username)
        client.headers["Authorization"] = f"Bearer {token}"

    return _apply


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make(username: str, full_name: str, role: str = "Player") -> User:
        user = User(username=username, password=DEFAULT_PASSWORD_HASH, full_name=full_name, role=role)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def admin_user(make_user) -> User:
    return make_user("admin", "Club Admin", role="Admin")


@pytest.fixture()
def player_user(make_user) -> User:
    return make_user("lin", "Lin Dan")


@pytest.fixture()
def other_player(make_user) -> User:
    return make_user("lee", "Lee Chong Wei")


@pytest.fixture()
def play_session(db_session: Session, admin_user: User) -> PlaySession:
    item = PlaySession(
        session_date=date(2025, 1, 10),
        session_time=time(18, 0),
        location="Court 1",
        created_by=admin_user.id,
    )
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item
