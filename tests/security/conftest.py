"""Fixtures for cross-user access tests."""
from collections.abc import AsyncGenerator, Callable
from typing import AsyncContextManager

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.link import Link
from models.user import User
from tests.conftest import make_user


@pytest.fixture
async def user_a(db_session: AsyncSession) -> User:
    """Owner of the resources under attack."""
    return await make_user(db_session, "user-a@example.com", "User A")


@pytest.fixture
async def user_b(db_session: AsyncSession) -> User:
    """User attempting to reach User A's resources."""
    return await make_user(db_session, "user-b@example.com", "User B")


@pytest.fixture
async def user_a_link(db_session: AsyncSession, user_a: User) -> Link:
    """A link owned by User A."""
    link = Link(
        user_id=user_a.id,
        url="https://user-a.example.com/private",
        title="User A private link",
        description="secret notes",
    )
    link.tags = ["private"]
    db_session.add(link)
    await db_session.flush()
    return link


@pytest.fixture
async def client_as_user_b(
    client_factory: Callable[..., AsyncContextManager[AsyncClient]],
    user_b: User,
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as User B."""
    async with client_factory(user_b) as client:
        yield client
