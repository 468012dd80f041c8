"""Signup and signin endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings
from core.security import create_access_token
from schemas.auth import AuthResponse, SigninRequest, SignupRequest, UserResponse
from services import user_service
from services.exceptions import EmailAlreadyExistsError, InvalidCredentialsError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Register a new user and return an access token."""
    try:
        user = await user_service.create_user(db, data)
    except EmailAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return AuthResponse(
        message="User created successfully",
        token=create_access_token(user.id, settings),
        user=UserResponse.model_validate(user),
    )


@router.post("/signin", response_model=AuthResponse)
async def signin(
    data: SigninRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Check credentials and return an access token."""
    try:
        user = await user_service.authenticate_user(db, data)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e
    return AuthResponse(
        message="Signed in successfully",
        token=create_access_token(user.id, settings),
        user=UserResponse.model_validate(user),
    )
