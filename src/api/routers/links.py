"""Link CRUD endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.user import User
from schemas.link import (
    LinkCreate,
    LinkListResponse,
    LinkMutationResponse,
    LinkResponse,
    LinkUpdate,
    MessageResponse,
    TagListResponse,
)
from services import link_service, tag_service
from services.exceptions import LinkConflictError, LinkNotFoundError, LinkValidationError

router = APIRouter(prefix="/links", tags=["links"])


@router.get("", response_model=LinkListResponse)
async def list_links(
    tag: str | None = Query(default=None, description="Only links carrying this tag"),
    search: str | None = Query(
        default=None,
        description="Case-insensitive text search across title, description and url",
    ),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> LinkListResponse:
    """
    List the current user's links, newest first.

    - **tag**: Filter to links whose tags contain this tag (case-insensitive)
    - **search**: Filter to links whose title, description or url contains this text

    When both are given a link must match the tag AND the search.
    """
    links = await link_service.list_links(
        db, current_user.id, tag=tag, search=search,
    )
    return LinkListResponse(links=[LinkResponse.model_validate(link) for link in links])


@router.get("/tags", response_model=TagListResponse)
async def list_tags(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> TagListResponse:
    """Get the distinct tags used across the current user's links, sorted."""
    tags = await tag_service.list_tags(db, current_user.id)
    return TagListResponse(tags=tags)


@router.post("", response_model=LinkMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    data: LinkCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> LinkMutationResponse:
    """Create a new link."""
    try:
        link = await link_service.create_link(db, current_user.id, data)
    except (LinkValidationError, LinkConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return LinkMutationResponse(
        message="Link created successfully",
        link=LinkResponse.model_validate(link),
    )


@router.patch("/{link_id}", response_model=LinkMutationResponse)
async def update_link(
    link_id: UUID,
    data: LinkUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> LinkMutationResponse:
    """
    Update a link. Only the fields present in the body are changed.

    Empty `url` or `title` values are ignored rather than applied.
    """
    try:
        link = await link_service.update_link(db, current_user.id, link_id, data)
    except LinkNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except (LinkValidationError, LinkConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return LinkMutationResponse(
        message="Link updated successfully",
        link=LinkResponse.model_validate(link),
    )


@router.delete("/{link_id}", response_model=MessageResponse)
async def delete_link(
    link_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MessageResponse:
    """Permanently delete a link."""
    try:
        await link_service.delete_link(db, current_user.id, link_id)
    except LinkNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return MessageResponse(message="Link deleted successfully")
