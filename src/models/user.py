"""User model for storing registered users."""
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin

if TYPE_CHECKING:
    from models.link import Link


class User(Base, UUIDv7Mixin, TimestampMixin):
    """User model - owns links; credentials are stored as a salted hash."""

    __tablename__ = "users"

    # id provided by UUIDv7Mixin
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        comment="Lower-cased login email",
    )
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password_hash: Mapped[str] = mapped_column(
        String(255),
        comment="pbkdf2_sha256$<iterations>$<salt>$<hash>",
    )

    links: Mapped[list["Link"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
