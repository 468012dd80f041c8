"""
Password hashing and access token helpers.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random per-user salt.
Access tokens are HS256 JWTs whose `sub` claim is the user id.
"""
import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from core.config import Settings

PASSWORD_HASH_ALGORITHM = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 260_000


def hash_password(password: str, iterations: int = PASSWORD_HASH_ITERATIONS) -> str:
    """
    Hash a password for storage.

    Returns:
        A string of the form ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``.
    """
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), iterations,
    ).hex()
    return f"{PASSWORD_HASH_ALGORITHM}${iterations}${salt}${digest}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a password against a stored hash using a constant-time comparison."""
    try:
        algorithm, iterations, salt, expected = stored_hash.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != PASSWORD_HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), rounds).hex()
    return hmac.compare_digest(digest, expected)


def create_access_token(
    user_id: UUID,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """Issue a signed access token for a user."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict:
    """
    Decode and verify an access token.

    Raises:
        jwt.PyJWTError: If the token is malformed, has a bad signature, or is expired.
    """
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
