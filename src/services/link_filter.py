"""
Filter construction for link list queries.

A LinkFilter is a plain description of what the caller asked for: the owner,
an optional tag and an optional free-text search. link_filter_clauses() turns it
into SQLAlchemy clauses that are always combined with AND:

    owner AND [tag clause] AND [(title ILIKE s OR description ILIKE s OR url ILIKE s)]
"""
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import ColumnElement, exists, or_, select

from models.link import Link, LinkTag
from schemas.validators import normalize_tag_filter
from services.utils import escape_like


@dataclass(frozen=True)
class LinkFilter:
    """Owner-scoped link predicate with optional tag and search parts."""

    user_id: UUID
    tag: str | None = None
    search: str | None = None


def build_link_filter(
    user_id: UUID,
    tag: str | None = None,
    search: str | None = None,
) -> LinkFilter:
    """
    Build a LinkFilter from raw query parameters.

    Args:
        user_id: Owner identity; every filter is scoped to it.
        tag: Tag to require. Lower-cased; empty means no tag filter.
        search: Case-insensitive substring to look for in title, description
            or url. Empty means no search filter. Not trimmed.

    Returns:
        The structured filter.
    """
    return LinkFilter(
        user_id=user_id,
        tag=normalize_tag_filter(tag),
        search=search or None,
    )


def tag_clause(tag: str) -> ColumnElement[bool]:
    """EXISTS subquery: the link's tag sequence contains this tag."""
    subq = select(LinkTag.id).where(
        LinkTag.link_id == Link.id,
        LinkTag.name == tag,
    )
    return exists(subq)


def search_clause(search: str) -> ColumnElement[bool]:
    """Case-insensitive substring match against title, description or url."""
    pattern = f"%{escape_like(search)}%"
    return or_(
        Link.title.ilike(pattern, escape="\\"),
        Link.description.ilike(pattern, escape="\\"),
        Link.url.ilike(pattern, escape="\\"),
    )


def link_filter_clauses(link_filter: LinkFilter) -> list[ColumnElement[bool]]:
    """
    Convert a LinkFilter into WHERE clauses.

    The returned clauses are meant to be passed together to ``.where(*clauses)``,
    which joins them with AND.
    """
    clauses: list[ColumnElement[bool]] = [Link.user_id == link_filter.user_id]
    if link_filter.tag is not None:
        clauses.append(tag_clause(link_filter.tag))
    if link_filter.search is not None:
        clauses.append(search_clause(link_filter.search))
    return clauses
