# tests/conftest.py
from __future__ import annotations

import base64
import os
from collections.abc import Generator, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from stellar_sdk import Keypair

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CHALLENGE_STORE_BACKEND", "memory")

from nedapay.api.v1.dependencies import get_challenge_authenticator
from nedapay.core.security import create_access_token
from nedapay.db.session import Base
from nedapay.db.session import get_db as app_get_session
from nedapay.main import app as fastapi_app
from nedapay.models import User
from nedapay.services.challenge_auth import ChallengeAuthenticator
from nedapay.services.challenge_store import InMemoryChallengeStore

TEST_DB_URL = "sqlite://"
TEST_TTL = timedelta(seconds=300)


class FakeClock:
    """Manually advanced clock injected into the authenticator."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture()
def authenticator(clock: FakeClock) -> ChallengeAuthenticator:
    return ChallengeAuthenticator(InMemoryChallengeStore(), ttl=TEST_TTL, clock=clock)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    authenticator: ChallengeAuthenticator,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_challenge_authenticator] = lambda: authenticator
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_challenge_authenticator, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def keypair() -> Keypair:
    return Keypair.random()


@pytest.fixture()
def other_keypair() -> Keypair:
    return Keypair.random()


def _create_user(db: Session, phone: str, keypair: Keypair, name: str) -> User:
    user = User(phone_number=phone, stellar_public_key=keypair.public_key, display_name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session, keypair: Keypair) -> User:
    """Create and return a persisted wallet holder."""
    return _create_user(db_session, "+255123456789", keypair, "Test User")


@pytest.fixture()
def other_user(db_session: Session, other_keypair: Keypair) -> User:
    """Create and return a second persisted wallet holder."""
    return _create_user(db_session, "+255987654321", other_keypair, "Other User")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


def sign_b64(keypair: Keypair, text: str) -> str:
    return base64.b64encode(keypair.sign(text.encode("utf-8"))).decode()


@pytest.fixture()
def signer() -> Any:
    return sign_b64
