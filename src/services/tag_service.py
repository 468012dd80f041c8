"""Service layer for tag operations."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.link import Link, LinkTag


async def list_tags(db: AsyncSession, user_id: UUID) -> list[str]:
    """
    Get the distinct tag names used across a user's links.

    Sorted in Python (by code point) so the order doesn't depend on the
    database collation.
    """
    result = await db.execute(
        select(LinkTag.name)
        .join(Link, LinkTag.link_id == Link.id)
        .where(Link.user_id == user_id)
        .distinct(),
    )
    return sorted(result.scalars().all())
