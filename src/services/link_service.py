"""Service layer for link CRUD operations."""
import logging
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.link import Link
from schemas.link import LinkCreate, LinkUpdate
from schemas.validators import (
    normalize_tags,
    validate_description_length,
    validate_title_length,
    validate_url,
)
from services.exceptions import LinkConflictError, LinkNotFoundError, LinkValidationError
from services.link_filter import build_link_filter, link_filter_clauses

logger = logging.getLogger(__name__)

# Name of the (user_id, url) unique constraint, and how SQLite reports the same violation.
URL_CONSTRAINT_MARKERS = ("uq_links_user_url", "links.user_id, links.url")


def _is_url_conflict(error: IntegrityError) -> bool:
    message = str(error)
    return any(marker in message for marker in URL_CONSTRAINT_MARKERS)


async def _find_link_by_url(
    db: AsyncSession,
    user_id: UUID,
    url: str,
) -> Link | None:
    """Return the user's link with exactly this URL, if any."""
    result = await db.execute(
        select(Link).where(
            Link.user_id == user_id,
            Link.url == url,
        ),
    )
    return result.scalar_one_or_none()


async def _flush_or_conflict(db: AsyncSession, url: str) -> None:
    """
    Flush pending changes, mapping a (user_id, url) constraint violation to a conflict.

    The pre-checks in create/update catch the sequential case; this covers two
    requests racing on the same URL.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        if _is_url_conflict(e):
            raise LinkConflictError(url) from e
        raise


async def create_link(
    db: AsyncSession,
    user_id: UUID,
    data: LinkCreate,
) -> Link:
    """
    Create a new link for a user.

    Args:
        db: Database session.
        user_id: Owner of the new link.
        data: Link creation data.

    Returns:
        The created link.

    Raises:
        LinkValidationError: If url/title are missing, the URL is not an absolute
            http(s) URL, or a field is too long.
        LinkConflictError: If the user already has a link with this URL.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    if not data.url or not data.title or not data.title.strip():
        raise LinkValidationError("URL and title are required")

    try:
        url = validate_url(data.url)
        title = validate_title_length(data.title.strip())
        description = validate_description_length((data.description or "").strip())
        tags = normalize_tags(data.tags or [])
    except ValueError as e:
        raise LinkValidationError(str(e)) from e

    if await _find_link_by_url(db, user_id, url) is not None:
        logger.info("Duplicate link URL rejected for user %s", user_id)
        raise LinkConflictError(url)

    link = Link(
        user_id=user_id,
        url=url,
        title=title,
        description=description,
    )
    link.tags = tags
    db.add(link)
    await _flush_or_conflict(db, url)
    # Load tag_rows so the response can read tags without an async lazy load
    await db.refresh(link, attribute_names=["tag_rows"])
    return link


async def get_link(
    db: AsyncSession,
    user_id: UUID,
    link_id: UUID,
) -> Link | None:
    """Get a link by ID, scoped to user. Returns None if not found or wrong user."""
    result = await db.execute(
        select(Link).where(
            Link.id == link_id,
            Link.user_id == user_id,
        ),
    )
    return result.scalar_one_or_none()


async def list_links(
    db: AsyncSession,
    user_id: UUID,
    tag: str | None = None,
    search: str | None = None,
) -> list[Link]:
    """
    List a user's links, newest first.

    Args:
        db: Database session.
        user_id: Owner whose links are listed.
        tag: Only return links whose tags contain this tag (case-insensitive).
        search: Only return links whose title, description or url contains this
            text (case-insensitive).

    Returns:
        Every matching link; there is no pagination.
    """
    link_filter = build_link_filter(user_id, tag=tag, search=search)
    result = await db.execute(
        select(Link)
        .where(*link_filter_clauses(link_filter))
        .order_by(Link.created_at.desc(), Link.id.desc()),
    )
    return list(result.scalars().all())


def _collect_changes(data: LinkUpdate) -> dict[str, Any]:
    """
    Validate and normalize the fields to apply for a partial update.

    url and title are only applied when truthy: an empty string or null is treated
    as "not provided". description and tags are applied whenever they are sent.
    """
    sent = data.model_fields_set
    changes: dict[str, Any] = {}
    try:
        if data.url:
            changes["url"] = validate_url(data.url)
        if data.title:
            title = data.title.strip()
            if not title:
                raise ValueError("Title cannot be empty")
            changes["title"] = validate_title_length(title)
        if "description" in sent:
            changes["description"] = validate_description_length(
                (data.description or "").strip(),
            )
        if "tags" in sent:
            changes["tags"] = normalize_tags(data.tags or [])
    except ValueError as e:
        raise LinkValidationError(str(e)) from e
    return changes


async def update_link(
    db: AsyncSession,
    user_id: UUID,
    link_id: UUID,
    data: LinkUpdate,
) -> Link:
    """
    Apply a partial update to a link owned by the user.

    Raises:
        LinkNotFoundError: If the link doesn't exist or belongs to another user.
        LinkValidationError: If a provided field is invalid.
        LinkConflictError: If the new URL is already used by another of the user's links.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    link = await get_link(db, user_id, link_id)
    if link is None:
        raise LinkNotFoundError(link_id)

    changes = _collect_changes(data)
    if not changes:
        return link

    new_url = changes.get("url")
    if new_url is not None and new_url != link.url:
        if await _find_link_by_url(db, user_id, new_url) is not None:
            logger.info("Duplicate link URL rejected on update for user %s", user_id)
            raise LinkConflictError(new_url)

    for field, value in changes.items():
        setattr(link, field, value)
    # Tag-only edits don't touch a column, so bump the timestamp explicitly.
    link.updated_at = utc_now()

    await _flush_or_conflict(db, link.url)
    return link


async def delete_link(
    db: AsyncSession,
    user_id: UUID,
    link_id: UUID,
) -> None:
    """
    Permanently delete a link owned by the user.

    Raises:
        LinkNotFoundError: If the link doesn't exist or belongs to another user.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    link = await get_link(db, user_id, link_id)
    if link is None:
        raise LinkNotFoundError(link_id)

    await db.delete(link)
    await db.flush()
