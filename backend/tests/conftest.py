"""
Mnemosyne Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (mocked DB, in-memory database,
       API client, registered users).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── engine: In-memory SQLite engine with every table created
    │   ├── db_session: Session bound to that engine (service tests)
    │   └── app: FastAPI app whose get_db_session uses that engine
    │       └── client: HTTPX AsyncClient talking to the app
    │           └── register_user: helper returning (token, user_id)
    └── auth_headers: builds an Authorization header from a token
"""

import os

# Override settings for testing BEFORE any mnemosyne imports
# Why: settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-access-secret-0123456789abcdef"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-0123456789abcdef"
os.environ["AUTO_CREATE_TABLES"] = "false"

from typing import AsyncGenerator, Awaitable, Callable, Dict, Tuple  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import mnemosyne.models  # noqa: E402,F401
from mnemosyne.database import Base, get_db_session  # noqa: E402
from mnemosyne.main import create_app  # noqa: E402


RegisterUser = Callable[..., Awaitable[Tuple[str, str]]]


# ══════════════════════════════════════════════════════════════════════════
# Mocked Persistence
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    What:    An AsyncMock that simulates AsyncSession behavior.
    Why:     Service rules that short-circuit before touching the database
             (self-follow, likedByMe without a caller) need no real DB.

    Usage:
        async def test_follow_self(mock_db_session):
            with pytest.raises(SelfFollowError):
                await follow_service.follow(mock_db_session, uid, uid)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps a single connection alive so every session (and every
    request made through the app) sees the same in-memory database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for calling services directly; rolled back if left open."""
    async with session_factory() as session:
        yield session
        if session.in_transaction():
            await session.rollback()


# ══════════════════════════════════════════════════════════════════════════
# Application & HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """
    A fresh application whose request sessions come from the test engine.

    Mirrors database.get_db_session: commit on success, roll back on error.
    """
    application = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    return bearer


@pytest.fixture
def register_user(client) -> RegisterUser:
    """
    Registers an account through the API.

    Returns:
        async callable (username, likes_private=False) → (access_token, user_id)
    """

    async def _register(username: str, likes_private: bool = False) -> Tuple[str, str]:
        response = await client.post(
            "/api/auth/register",
            json={
                "email": f"{username}@example.com",
                "password": "password123",
                "username": username,
                "likesPrivate": likes_private,
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return data["accessToken"], data["user"]["id"]

    return _register


@pytest.fixture
def create_quote(client) -> Callable[..., Awaitable[str]]:
    """Creates a quote through the API and returns its id."""

    async def _create(
        text: str = "The unexamined life is not worth living.",
        author: str = "Socrates",
        token: str = None,
        **fields,
    ) -> str:
        headers = bearer(token) if token else {}
        response = await client.post(
            "/api/quotes",
            json={"text": text, "author": author, **fields},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["id"]

    return _create
