"""Service layer for user signup and signin."""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import hash_password, verify_password
from models.user import User
from schemas.auth import SigninRequest, SignupRequest
from services.exceptions import EmailAlreadyExistsError, InvalidCredentialsError

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Look up a user by (already normalized) email."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: SignupRequest) -> User:
    """
    Register a new user.

    Raises:
        EmailAlreadyExistsError: If the email is already registered.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    if await get_user_by_email(db, data.email) is not None:
        raise EmailAlreadyExistsError(data.email)

    user = User(
        email=data.email,
        name=data.name.strip() if data.name else None,
        password_hash=hash_password(data.password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise EmailAlreadyExistsError(data.email) from e
    logger.info("Registered user %s", user.id)
    return user


async def authenticate_user(db: AsyncSession, data: SigninRequest) -> User:
    """
    Check signin credentials.

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong.
            Both cases use the same error so signin doesn't reveal which emails exist.
    """
    user = await get_user_by_email(db, data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        raise InvalidCredentialsError()
    return user
