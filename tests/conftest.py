"""
Pytest configuration and fixtures for Ascent Finance API tests.

This module provides:
- A fresh SQLite database per test
- Async HTTP client bound to the application
- Registered user fixtures with ready-to-use auth headers
- Fakes for Google identity verification
"""

# Set environment variables BEFORE importing anything from src
import os

os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ["RATE_LIMIT_DEFAULT"] = "10000/minute"
os.environ["RATE_LIMIT_AUTH"] = "10000/minute"
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "8192"
os.environ["ARGON2_PARALLELISM"] = "1"
os.environ["QUOTE_BATCH_DELAY_SECONDS"] = "0"
os.environ["FINNHUB_API_KEY"] = "test-finnhub-key"
os.environ["ALPHAVANTAGE_API_KEY"] = ""
os.environ["GOOGLE_CLIENT_ID"] = "test-client.apps.googleusercontent.com"
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.core.database import create_sessionmaker
from src.exceptions import AuthenticationError
from src.integrations.google_identity import GoogleIdentity, GoogleIdentityClient
from src.main import app
from src.models import Base
from src.services.quote_service import quote_cache

DEFAULT_PASSWORD = "secret123"

RegisteredUser = dict[str, Any]


# ============================================================================
# Database Fixtures
# ============================================================================
@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a SQLite database file for one test.

    Every test starts from an empty schema, so no cleanup between tests is
    needed.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for service-level tests."""
    async with session_factory() as session:
        yield session


# ============================================================================
# FastAPI Client Fixtures
# ============================================================================
@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async client talking to the app in-process.

    The lifespan does not run under ASGITransport, so the test sessionmaker
    is installed on ``app.state`` directly.
    """
    app.state.sessionmaker = session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.state.sessionmaker = None
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_quote_cache():
    quote_cache.clear()
    yield
    quote_cache.clear()


# ============================================================================
# User Fixtures
# ============================================================================
def bearer(token: str, workspace_id: str | None = None) -> dict[str, str]:
    headers = {"Authorization": f"Bearer {token}"}
    if workspace_id:
        headers["X-Workspace-Id"] = workspace_id
    return headers


@pytest.fixture
def register_user(
    async_client: AsyncClient,
) -> Callable[..., Awaitable[RegisteredUser]]:
    """
    Factory registering a local account through the API.

    Returns a dict with ``user``, ``token`` and ``headers``.
    """

    async def _register(
        email: str,
        password: str = DEFAULT_PASSWORD,
        full_name: str | None = None,
    ) -> RegisteredUser:
        response = await async_client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "full_name": full_name},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {"user": data["user"], "token": data["token"], "headers": bearer(data["token"])}

    return _register


@pytest_asyncio.fixture
async def alice(register_user) -> RegisteredUser:
    return await register_user("alice@example.com", full_name="Alice")


@pytest_asyncio.fixture
async def bob(register_user) -> RegisteredUser:
    return await register_user("bob@example.com", full_name="Bob")


# ============================================================================
# Google Fixtures
# ============================================================================
@pytest.fixture
def google_identities(monkeypatch) -> dict[str, GoogleIdentity]:
    """
    Replace Google token verification with a lookup table.

    Tests register ``credential -> GoogleIdentity``; unknown credentials are
    rejected like Google would reject them.
    """
    identities: dict[str, GoogleIdentity] = {}

    async def verify_id_token(self, credential: str, client_id: str | None = None):
        if credential not in identities:
            raise AuthenticationError("Failed to verify Google token")
        return identities[credential]

    async def verify_access_token(self, token: str):
        if token not in identities:
            raise AuthenticationError("Failed to verify Google token")
        return identities[token]

    monkeypatch.setattr(GoogleIdentityClient, "verify_id_token", verify_id_token)
    monkeypatch.setattr(GoogleIdentityClient, "verify_access_token", verify_access_token)
    return identities
