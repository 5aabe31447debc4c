"""
Top-level pytest configuration.

Provides:
  - A fresh in-memory SQLite database (aiosqlite) with all tables per test.
  - A db_session fixture on that database. Services commit for real; the
    whole database disappears with the engine at teardown.
  - An async_client fixture wired to the FastAPI app with Redis replaced by
    fakeredis.
  - Seeded member / matchmaker users with profiles and auth header fixtures.
"""

from __future__ import annotations

import os
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator

# ---------------------------------------------------------------------------
# Environment must be set BEFORE any app module is imported so that
# pydantic-settings picks up the test values.
# ---------------------------------------------------------------------------
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")
os.environ.setdefault("POSTGRES_DB", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-32c")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import pytest
import pytest_asyncio
import fakeredis
import fakeredis.aioredis as fakeredis_async
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)


# ---------------------------------------------------------------------------
# Per-test engine (SQLite in-memory, shared via StaticPool so every session
# in a test sees the same data). A new engine per test keeps the engine on
# the test's own event loop and gives each test an empty schema.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine():
    """Create the SQLite test engine and all tables for one test."""
    # Import Base here (after env vars are set) to ensure models register.
    from app.core.database import Base
    import app.models  # noqa: F401

    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session shared by the test body and the app."""
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Redis mock: fakeredis so the user cache works without a real server.
# ---------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    """Replace the Redis client with an in-process fakeredis instance."""
    fake_server = fakeredis.FakeServer()
    fake_redis = fakeredis_async.FakeRedis(server=fake_server, decode_responses=True)

    async def _get_redis():
        return fake_redis

    monkeypatch.setattr("app.core.cache.get_redis", _get_redis)
    return fake_redis


# ---------------------------------------------------------------------------
# Override FastAPI database dependency to use the test session.
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an httpx AsyncClient backed by the FastAPI app.

    The app's get_db dependency is overridden to yield the test session so
    requests see data seeded in the test and the test sees what requests wrote.
    """
    from app.core.database import get_db
    from app.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seeded fixtures
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession):
    """Persisted member (woman looking for men, in New York) with a matchable profile."""
    from tests.factories import ProfileFactory, UserFactory

    user = await UserFactory.create_async(db_session, email="viewer@example.com")
    await ProfileFactory.create_async(
        db_session,
        user_id=user.id,
        first_name="Viewer",
        gender="woman",
        looking_for=["man"],
        latitude=40.7128,
        longitude=-74.0060,
        date_of_birth=date(1995, 6, 1),
        created_at=datetime.now(timezone.utc) - timedelta(days=30),
    )
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def test_matchmaker(db_session: AsyncSession):
    """Persisted matchmaker account (no profile of their own)."""
    from app.models.user import UserRole
    from tests.factories import UserFactory

    user = await UserFactory.create_async(
        db_session, email="matchmaker@example.com", role=UserRole.MATCHMAKER
    )
    await db_session.commit()
    return user


def _token_for(user_id: uuid.UUID) -> str:
    from app.core.security import create_access_token
    return create_access_token(data={"sub": str(user_id)})


@pytest.fixture
def user_token(test_user) -> str:
    """Valid access token for the member test user."""
    return _token_for(test_user.id)


@pytest.fixture
def auth_headers(user_token: str) -> dict[str, str]:
    """Authorization headers for the member test user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def matchmaker_auth_headers(test_matchmaker) -> dict[str, str]:
    """Authorization headers for the matchmaker test user."""
    return {"Authorization": f"Bearer {_token_for(test_matchmaker.id)}"}


@pytest.fixture
def headers_for():
    """Build Authorization headers for any user."""
    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(user.id)}"}
    return _headers
