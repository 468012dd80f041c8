"""Application configuration using pydantic-settings."""
from functools import lru_cache
from urllib.parse import urlparse

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default signing key for local development only. Rejected for non-local databases.
DEV_JWT_SECRET_KEY = "dev-secret-change-me"

# Widths of the links.title and link_tags.name columns; the configurable limits
# may be lowered but not raised past these.
TITLE_COLUMN_LENGTH = 200
TAG_COLUMN_LENGTH = 50


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")

    # Auth - HS256 tokens issued at signin/signup
    jwt_secret_key: str = Field(default=DEV_JWT_SECRET_KEY, validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Routing
    api_prefix: str = Field(default="/api/v1", validation_alias="API_PREFIX")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Field length limits
    max_title_length: int = Field(
        default=TITLE_COLUMN_LENGTH,
        gt=0,
        le=TITLE_COLUMN_LENGTH,
        validation_alias="MAX_TITLE_LENGTH",
    )
    max_description_length: int = Field(
        default=500, validation_alias="MAX_DESCRIPTION_LENGTH",
    )
    max_tag_length: int = Field(
        default=TAG_COLUMN_LENGTH,
        gt=0,
        le=TAG_COLUMN_LENGTH,
        validation_alias="MAX_TAG_LENGTH",
    )

    @model_validator(mode="after")
    def validate_secret_key_security(self) -> "Settings":
        """
        Prevent the development signing key from being used with a remote database.

        Anyone who knows the default key can mint tokens for any user, so it is only
        accepted together with a local (or in-memory) database.
        """
        if self.jwt_secret_key != DEV_JWT_SECRET_KEY:
            return self

        try:
            parsed = urlparse(self.database_url)
            hostname = parsed.hostname or ""
        except ValueError:
            hostname = "unparseable"

        # sqlite URLs have no host
        local_hosts = {"", "localhost", "127.0.0.1", "0.0.0.0", "::1"}
        if hostname.lower() not in local_hosts:
            raise ValueError(
                f"JWT_SECRET_KEY must be set when using a non-local database. "
                f"Database host '{hostname}' appears to be a production database.",
            )

        return self

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
