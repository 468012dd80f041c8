"""Authentication dependency resolving bearer tokens to users."""
import logging
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.security import decode_access_token
from db.session import get_async_session
from models.user import User

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_user_id_from_token(token: str, settings: Settings) -> UUID:
    """
    Validate an access token and return the user id in its `sub` claim.

    Raises:
        HTTPException: 401 if the token is invalid, expired, or has a bad subject.
    """
    try:
        payload = decode_access_token(token, settings)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.PyJWTError as e:
        logger.warning("Access token validation failed: %s", e)
        raise _unauthorized("Invalid token")

    try:
        return UUID(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token: bad sub claim")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Dependency that validates the bearer token and returns the current user.

    Link routes trust this identity unconditionally; every query they run is
    scoped to the returned user's id.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = get_user_id_from_token(credentials.credentials, settings)
    user = await db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user
