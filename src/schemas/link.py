"""Pydantic schemas for link endpoints."""
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class LinkCreate(BaseModel):
    """
    Schema for creating a new link.

    Fields are optional at the schema level so missing url/title surface as the
    service's validation error rather than a generic body error.
    """

    url: str | None = None
    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None


class LinkUpdate(BaseModel):
    """
    Schema for a partial link update.

    Only fields present in the request body are considered (see model_fields_set).
    Falsy url/title values are ignored by the service rather than applied.
    """

    url: str | None = None
    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None


class LinkResponse(BaseModel):
    """
    Client-facing projection of a link.

    The owner id is never included. Serialized with camelCase keys (createdAt).
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: UUID
    url: str
    title: str
    description: str
    tags: list[str]
    created_at: datetime

    @model_validator(mode="before")
    @classmethod
    def extract_fields(cls, data: Any) -> Any:
        """Copy projected fields from a Link model, materializing the tag proxy."""
        if hasattr(data, "__table__"):
            return {
                "id": data.id,
                "url": data.url,
                "title": data.title,
                "description": data.description,
                "tags": list(data.tags),
                "created_at": data.created_at,
            }
        return data

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps (SQLite drops the offset) as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)


class LinkListResponse(BaseModel):
    """Schema for the link list response."""

    success: bool = True
    links: list[LinkResponse]


class LinkMutationResponse(BaseModel):
    """Schema for create/update responses."""

    success: bool = True
    message: str
    link: LinkResponse


class TagListResponse(BaseModel):
    """Schema for the distinct tag list response."""

    success: bool = True
    tags: list[str]


class MessageResponse(BaseModel):
    """Schema for responses that carry only a message (delete, errors)."""

    success: bool = True
    message: str
