"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_JWT_SECRET_BYTES = 32


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
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")

    # Session tokens (HS256 signed, carried in the "token" cookie)
    jwt_secret: str = Field(validation_alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    session_ttl_seconds: int = Field(default=86_400, validation_alias="SESSION_TTL_SECONDS")
    cookie_secure: bool = Field(default=False, validation_alias="COOKIE_SECURE")

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        validation_alias="CORS_ORIGINS",
    )

    # List result cache
    result_cache_backend: Literal["memory", "redis"] = Field(
        default="memory", validation_alias="RESULT_CACHE_BACKEND",
    )
    result_cache_ttl_seconds: int = Field(default=60, validation_alias="RESULT_CACHE_TTL_SECONDS")
    result_cache_max_entries: int = Field(
        default=1000, validation_alias="RESULT_CACHE_MAX_ENTRIES",
    )

    # Redis - only used when RESULT_CACHE_BACKEND=redis
    redis_url: str = Field(default="redis://localhost:6379", validation_alias="REDIS_URL")
    redis_pool_size: int = Field(default=20, validation_alias="REDIS_POOL_SIZE")

    # Pagination
    max_page_size: int = Field(default=100, validation_alias="MAX_PAGE_SIZE")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """
        Refuse to start with a weak signing secret.

        HS256 tokens are only as strong as the shared secret, and every
        protected endpoint trusts the claims inside them.
        """
        if len(self.jwt_secret.encode()) < MIN_JWT_SECRET_BYTES:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_JWT_SECRET_BYTES} bytes long.",
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
