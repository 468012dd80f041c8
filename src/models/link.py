"""Link model for storing user bookmarks."""
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.config import TAG_COLUMN_LENGTH, TITLE_COLUMN_LENGTH
from models.base import Base, TimestampMixin, UUIDv7Mixin

if TYPE_CHECKING:
    from models.user import User


class LinkTag(Base):
    """
    One entry in a link's tag sequence.

    Tags are stored as ordered rows rather than a shared tag table because the
    sequence keeps the caller's order and may contain the same name twice.
    """

    __tablename__ = "link_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    link_id: Mapped[UUID] = mapped_column(
        ForeignKey("links.id", ondelete="CASCADE"),
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(TAG_COLUMN_LENGTH), nullable=False, index=True)

    link: Mapped["Link"] = relationship(back_populates="tag_rows")

    def __init__(self, name: str) -> None:
        self.name = name


class Link(Base, UUIDv7Mixin, TimestampMixin):
    """Link model - stores a URL with title, description and tags for one owner."""

    __tablename__ = "links"
    __table_args__ = (
        UniqueConstraint("user_id", "url", name="uq_links_user_url"),
    )

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(String(TITLE_COLUMN_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    user: Mapped["User"] = relationship(back_populates="links")
    tag_rows: Mapped[list[LinkTag]] = relationship(
        back_populates="link",
        order_by=LinkTag.position,
        lazy="selectin",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Plain list of tag names; assigning replaces the whole sequence.
    tags: AssociationProxy[list[str]] = association_proxy("tag_rows", "name")
