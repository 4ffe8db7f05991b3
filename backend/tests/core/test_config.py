"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import Settings

SECRET = "config-test-secret-with-at-least-32-bytes"


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_multiple_origins_comma_separated(self) -> None:
        """Multiple comma-separated origins are parsed correctly."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            JWT_SECRET=SECRET,
            CORS_ORIGINS="http://localhost:3000,https://dashboard.example.com",
        )
        assert settings.cors_origins == [
            "http://localhost:3000",
            "https://dashboard.example.com",
        ]

    def test_parse_origins_with_whitespace_and_trailing_comma(self) -> None:
        """Whitespace is stripped and empty entries are dropped."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            JWT_SECRET=SECRET,
            CORS_ORIGINS="  http://localhost:3000 , ",
        )
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        settings = Settings(
            _env_file=None,
            database_url="postgresql://test",
            JWT_SECRET=SECRET,
            CORS_ORIGINS="",
        )
        assert settings.cors_origins == []


class TestJwtSecret:
    """Tests for session signing secret validation."""

    def test_short_secret_rejected(self) -> None:
        """Secrets under 32 bytes fail validation."""
        with pytest.raises(ValidationError, match="JWT_SECRET"):
            Settings(_env_file=None, database_url="postgresql://test", JWT_SECRET="short")

    def test_missing_secret_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """There is no default signing secret."""
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="postgresql://test")


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Cache, session, and paging defaults."""
        for name in (
            "RESULT_CACHE_BACKEND",
            "RESULT_CACHE_TTL_SECONDS",
            "SESSION_TTL_SECONDS",
            "MAX_PAGE_SIZE",
            "COOKIE_SECURE",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None, database_url="postgresql://test", JWT_SECRET=SECRET)

        assert settings.result_cache_backend == "memory"
        assert settings.result_cache_ttl_seconds == 60
        assert settings.session_ttl_seconds == 86_400
        assert settings.max_page_size == 100
        assert settings.cookie_secure is False
        assert settings.jwt_algorithm == "HS256"

    def test_unknown_cache_backend_rejected(self) -> None:
        """Only memory and redis backends exist."""
        with pytest.raises(ValidationError):
            Settings(
                _env_file=None,
                database_url="postgresql://test",
                JWT_SECRET=SECRET,
                RESULT_CACHE_BACKEND="memcached",
            )
