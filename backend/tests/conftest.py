"""Pytest configuration and shared fixtures."""

import os

# Settings are read once at import time, so the environment must be set first
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")

from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import testhub.models  # noqa: F401
from testhub.core.app_exceptions import GatewayError
from testhub.core.security import create_access_token
from testhub.db.base import Base
from testhub.db.engine import create_db_engine
from testhub.db.session import get_db
from testhub.main import app
from testhub.models.user import User
from testhub.services.payments import PaymentGateway, get_payment_gateway
from tests.helpers.seed import create_test_admin, create_test_user


class FakeGateway(PaymentGateway):
    """In-memory gateway recording every request it receives."""

    name = "fake"

    def __init__(self):
        self.created: list[tuple[Decimal, str]] = []
        self.error: GatewayError | None = None
        self._counter = 0

    def create_payment(self, amount: Decimal, description: str) -> tuple[str, str]:
        if self.error is not None:
            raise self.error
        self._counter += 1
        self.created.append((amount, description))
        payment_id = f"fake-order-{self._counter}"
        return f"https://pay.example.com/{payment_id}", payment_id

    def verify_payment(self, payment_id: str) -> bool:
        return True


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh in-memory database per test."""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def client(db, gateway) -> Generator[TestClient, None, None]:
    """FastAPI test client bound to the test database and fake gateway."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close the session, it's managed by the db fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def test_user(db) -> User:
    """Create a regular user."""
    user = create_test_user(db)
    db.commit()
    return user


@pytest.fixture
def test_admin_user(db) -> User:
    """Create an admin user."""
    user = create_test_admin(db)
    db.commit()
    return user


def auth_headers_for(user: User) -> dict[str, str]:
    token = create_access_token(user_id=str(user.id), role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_user) -> dict[str, str]:
    """Authorization header for the regular user."""
    return auth_headers_for(test_user)


@pytest.fixture
def auth_headers_admin(test_admin_user) -> dict[str, str]:
    """Authorization header for the admin user."""
    return auth_headers_for(test_admin_user)
