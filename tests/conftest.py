"""Pytest configuration and shared fixtures.

Tests run against a throwaway SQLite database per test (aiosqlite) unless
TEST_DATABASE_URL points at another database, and against an in-memory rate
limit store. Required settings get safe defaults before the app is imported.
"""

from __future__ import annotations

import os

os.environ.setdefault("POSTGRES_USER", "postgres")
os.environ.setdefault("POSTGRES_PASSWORD", "postgres")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")
os.environ.setdefault("POSTGRES_DB", "tiktok_analytics")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("REDIS_DB", "0")
os.environ.setdefault("JWT_SECRET_KEY", "Test-Secret-Key-For-Unit-Tests-0123456789!")
os.environ.setdefault("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "30")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_STORAGE_URL", "memory://")

from collections.abc import AsyncIterator, Callable  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any, cast  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from pydantic import PostgresDsn  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

import app.db.models  # noqa: E402,F401
from app.api.schemas import RegisterUserRequest  # noqa: E402
from app.core import config  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import dispose_engine, get_engine, get_session_maker  # noqa: E402
from app.main import create_app  # noqa: E402
from app.tiktok.client import TikTokClient  # noqa: E402
from app.tiktok.schemas import TikTokProfile  # noqa: E402


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if "sqlite" not in type(dbapi_connection).__module__:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FakeTikTokClient(TikTokClient):
    """In-memory provider: returns the configured payloads or raises the configured errors."""

    def __init__(self) -> None:
        self.videos_payload: Any = {"videos": []}
        self.videos_error: Exception | None = None
        self.profile_error: Exception | None = None
        self.video_calls: list[tuple[str, int]] = []
        self.profile_calls: list[str] = []
        self.closed = False

    async def fetch_profile(self, handle: str) -> TikTokProfile:
        self.profile_calls.append(handle)
        if self.profile_error is not None:
            raise self.profile_error
        return TikTokProfile(uniqueId=handle, nickname=handle.title())

    async def fetch_videos(self, handle: str, limit: int) -> Any:
        self.video_calls.append((handle, limit))
        if self.videos_error is not None:
            raise self.videos_error
        return self.videos_payload

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    """Each test starts with fresh rate limit counters."""
    limiter.reset()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def test_engine(
    database_url: str, monkeypatch: pytest.MonkeyPatch
) -> AsyncIterator[AsyncEngine]:
    """Point the app's engine at the test database and create all tables."""
    monkeypatch.setattr(config.settings, "database_url", cast(PostgresDsn, database_url))
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await dispose_engine()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """A session on the same database the app under test uses."""
    async with get_session_maker()() as session:
        yield session


@pytest.fixture
def fake_tiktok_client() -> FakeTikTokClient:
    return FakeTikTokClient()


@pytest_asyncio.fixture
async def async_app(test_engine: AsyncEngine, fake_tiktok_client: FakeTikTokClient) -> FastAPI:
    return create_app(tiktok_client=fake_tiktok_client)


@pytest_asyncio.fixture
async def async_http_client(async_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=async_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def register_and_login(
    async_http_client: AsyncClient,
) -> Callable[..., Any]:
    """Return a coroutine that registers a user and returns bearer auth headers."""

    async def _register_and_login(
        email: str = "creator@example.com", username: str = "creator"
    ) -> dict[str, str]:
        payload = RegisterUserRequest(
            email=email,
            username=username,
            password="password123",
            confirm_password="password123",
        ).model_dump()
        response = await async_http_client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        response = await async_http_client.post(
            "/api/auth/login", json={"email": email, "password": "password123"}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register_and_login
