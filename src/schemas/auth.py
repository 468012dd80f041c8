"""Pydantic schemas for signup/signin endpoints."""
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignupRequest(BaseModel):
    """Schema for registering a new user."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Trim and lower-case the email and require an @."""
        normalized = v.strip().lower()
        if "@" not in normalized:
            raise ValueError("Please provide a valid email")
        return normalized


class SigninRequest(BaseModel):
    """Schema for signing in."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Trim and lower-case the email."""
        return v.strip().lower()


class UserResponse(BaseModel):
    """Public user fields returned with a token."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str | None


class AuthResponse(BaseModel):
    """Schema for successful signup/signin responses."""

    success: bool = True
    message: str
    token: str
    user: UserResponse
