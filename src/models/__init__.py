"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.link import Link, LinkTag
from models.user import User

__all__ = [
    "Base",
    "Link",
    "LinkTag",
    "TimestampMixin",
    "UUIDv7Mixin",
    "User",
]
