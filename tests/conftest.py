"""Shared test fixtures.

Tests run against an in-memory SQLite database (through aiosqlite) with the
schema created from the ORM metadata, and without Redis.
"""

from __future__ import annotations

import os

os.environ.setdefault("POKERLOG_DATABASE_URL", "sqlite+aiosqlite://")
os.environ["POKERLOG_REDIS_URL"] = ""
os.environ["POKERLOG_LOG_FORMAT"] = "console"
os.environ["POKERLOG_JWT_SECRET"] = "test-secret"

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pokerlog.auth.jwt import create_access_token  # noqa: E402
from pokerlog.config import get_settings  # noqa: E402
from pokerlog.database import engine_options, get_session  # noqa: E402
from pokerlog.db.base import Base  # noqa: E402
from pokerlog.db.models import User  # noqa: E402
from pokerlog.main import create_app  # noqa: E402
from pokerlog.users.service import get_or_create_user  # noqa: E402

get_settings.cache_clear()


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    url = "sqlite+aiosqlite://"
    eng = create_async_engine(url, **engine_options(url))
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service calls and assertions."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    """A bootstrapped user (default challenges included)."""
    return await get_or_create_user(db_session, "uid-alice", email="alice@example.com", display_name="Alice")


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the ASGI app with the test database wired in."""
    app = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build a bearer header for an identity-provider subject."""

    def _headers(subject: str = "uid-alice", name: str | None = "Alice", email: str | None = None) -> dict[str, str]:
        token = create_access_token(subject, email=email, name=name)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, auth_headers) -> AsyncClient:
    """Client authenticated as ``uid-alice``."""
    client.headers.update(auth_headers())
    return client
