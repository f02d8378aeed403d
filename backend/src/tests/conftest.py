"""
Root test configuration and fixtures.

Provides:
- db_engine / db_session: SQLite in-memory database per test
- make_config: factory for AppConfig instances
- app / client: FastAPI app with database and config dependencies overridden
- sign_params: helper that signs App Proxy query parameters
- session_token: helper that issues Shopify session tokens
"""

import os
import time
from typing import Generator

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Set test environment before the app module loads its config
os.environ.setdefault("ENV", "test")

TEST_SHOP = "test-store.myshopify.com"
TEST_API_KEY = "test-api-key"
# HS256 keys should be at least 32 bytes
TEST_API_SECRET = "test-api-secret-0123456789abcdef0123"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite in-memory database for each test."""
    from src.db_base import Base
    import src.models  # noqa: F401 - registers model metadata

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create database session bound to the per-test engine."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()

    yield session

    session.close()


@pytest.fixture
def make_config():
    """Factory for AppConfig with test credentials."""
    from src.config.app_config import AppConfig

    def _make(**overrides):
        values = {
            "environment": "production",
            "shopify_api_key": TEST_API_KEY,
            "shopify_api_secret": TEST_API_SECRET,
            "database_url": "sqlite:///:memory:",
        }
        values.update(overrides)
        return AppConfig(**values)

    return _make


@pytest.fixture
def app_config(make_config):
    """Production config; tests needing another mode override it."""
    return make_config()


@pytest.fixture
def app(db_session, app_config):
    """FastAPI app with database and config dependencies overridden."""
    from main import app as fastapi_app
    from src.config.app_config import get_app_config
    from src.database.session import get_db_session

    def override_get_db_session():
        yield db_session

    fastapi_app.dependency_overrides[get_db_session] = override_get_db_session
    fastapi_app.dependency_overrides[get_app_config] = lambda: app_config

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sign_params():
    """Return a copy of params with a valid App Proxy signature added."""
    from src.platform.app_proxy import compute_proxy_signature

    def _sign(params: dict, secret: str = TEST_API_SECRET) -> dict:
        signed = dict(params)
        signed["signature"] = compute_proxy_signature(params, secret)
        return signed

    return _sign


@pytest.fixture
def session_token():
    """Issue a Shopify App Bridge session token."""

    def _issue(
        shop: str = TEST_SHOP,
        secret: str = TEST_API_SECRET,
        audience: str = TEST_API_KEY,
        expires_in: int = 60,
        **claims,
    ) -> str:
        now = int(time.time())
        payload = {
            "iss": f"https://{shop}/admin",
            "dest": f"https://{shop}",
            "aud": audience,
            "sub": "42",
            "iat": now,
            "nbf": now - 5,
            "exp": now + expires_in,
        }
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm="HS256")

    return _issue
