"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str


async def _database_reachable(db: AsyncSession) -> bool:
    try:
        await db.execute(select(1))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """Report whether the API can reach its database. Requires no authentication."""
    if await _database_reachable(db):
        return HealthResponse(status="healthy", database="healthy")
    return HealthResponse(status="degraded", database="unhealthy")
