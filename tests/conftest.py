"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Callable, Generator
from contextlib import asynccontextmanager
from typing import AsyncContextManager

# Must be set before any app imports that trigger Settings validation.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.config import get_settings  # noqa: E402
from core.security import create_access_token, hash_password  # noqa: E402
from models.base import Base  # noqa: E402
from models.user import User  # noqa: E402

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
TEST_PASSWORD = "correct-horse"


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create an engine with a fresh schema for each test.

    In-memory SQLite uses a StaticPool so every session shares one connection
    (and therefore one database).
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session; nothing is committed, so each test starts empty."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


async def make_user(db_session: AsyncSession, email: str, name: str | None = None) -> User:
    """Insert a user with TEST_PASSWORD (cheap hash to keep tests fast)."""
    user = User(
        email=email,
        name=name,
        password_hash=hash_password(TEST_PASSWORD, iterations=1_000),
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create the default test user."""
    return await make_user(db_session, "test@example.com", "Test User")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create another test user for isolation tests."""
    return await make_user(db_session, "other@example.com", "Other User")


@pytest.fixture
def client_factory(
    db_session: AsyncSession,
) -> Generator[Callable[..., AsyncContextManager[AsyncClient]]]:
    """
    Factory fixture that creates test clients, optionally authenticated as a user.

    Usage:
        async with client_factory(user_a) as client:
            response = await client.get("/api/v1/links")
    """
    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    @asynccontextmanager
    async def _make_client(
        user: User | None = None,
        raise_app_exceptions: bool = True,
    ) -> AsyncGenerator[AsyncClient]:
        headers = {}
        if user is not None:
            token = create_access_token(user.id, get_settings())
            headers["Authorization"] = f"Bearer {token}"

        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
            base_url="http://test",
            headers=headers,
        ) as test_client:
            yield test_client

    app.dependency_overrides[get_async_session] = override_get_async_session
    yield _make_client
    app.dependency_overrides.clear()


@pytest.fixture
async def client(
    client_factory: Callable[..., AsyncContextManager[AsyncClient]],
    test_user: User,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client authenticated as test_user."""
    async with client_factory(test_user) as test_client:
        yield test_client


@pytest.fixture
async def anon_client(
    client_factory: Callable[..., AsyncContextManager[AsyncClient]],
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with no Authorization header."""
    async with client_factory() as test_client:
        yield test_client
