"""Tests for password hashing and access tokens."""
from datetime import timedelta
from uuid import uuid4

import jwt
import pytest

from core.config import Settings
from core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        JWT_SECRET_KEY="test-secret",
    )


class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    def test_round_trip(self) -> None:
        stored = hash_password("s3cret!", iterations=1_000)

        assert verify_password("s3cret!", stored)
        assert not verify_password("wrong", stored)

    def test_salted(self) -> None:
        """The same password hashes differently each time."""
        assert hash_password("same", iterations=1_000) != hash_password("same", iterations=1_000)

    def test_format(self) -> None:
        algorithm, iterations, salt, digest = hash_password("pw", iterations=1_000).split("$")

        assert algorithm == "pbkdf2_sha256"
        assert iterations == "1000"
        assert salt
        assert len(digest) == 64

    @pytest.mark.parametrize(
        "stored",
        ["", "plaintext", "md5$1$salt$abc", "pbkdf2_sha256$notanumber$salt$abc"],
    )
    def test_malformed_hash_never_verifies(self, stored: str) -> None:
        assert not verify_password("pw", stored)


class TestAccessTokens:
    """Tests for create_access_token / decode_access_token."""

    def test_round_trip(self, settings: Settings) -> None:
        user_id = uuid4()

        payload = decode_access_token(create_access_token(user_id, settings), settings)

        assert payload["sub"] == str(user_id)
        assert payload["exp"] > payload["iat"]

    def test_expired(self, settings: Settings) -> None:
        token = create_access_token(uuid4(), settings, expires_delta=timedelta(seconds=-1))

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token, settings)

    def test_wrong_key(self, settings: Settings) -> None:
        token = jwt.encode({"sub": "x", "exp": 4102444800}, "other-key", algorithm="HS256")

        with pytest.raises(jwt.InvalidSignatureError):
            decode_access_token(token, settings)

    def test_missing_sub(self, settings: Settings) -> None:
        token = jwt.encode({"exp": 4102444800}, settings.jwt_secret_key, algorithm="HS256")

        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_access_token(token, settings)
