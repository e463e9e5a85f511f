"""Tests for application configuration."""
import pytest
from pydantic import ValidationError

from core.config import INSECURE_DEFAULT_SECRET, Settings

GOOD_SECRET = "config-test-secret-0123456789abcdef01"


def make_settings(**overrides: object) -> Settings:
    """Build Settings without reading a local .env file."""
    values: dict[str, object] = {
        "jwt_secret_key": GOOD_SECRET,
        "registration_code": "code",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unset optional values fall back to their defaults."""
        for name in ("DATABASE_URL", "JWT_ALGORITHM", "STRICT_REORDER", "API_PREFIX", "PORT"):
            monkeypatch.delenv(name, raising=False)
        settings = make_settings()

        assert settings.database_url == "sqlite+aiosqlite:///./bookmarks.db"
        assert settings.jwt_algorithm == "HS256"
        assert settings.strict_reorder is False
        assert settings.api_prefix == "/api"
        assert settings.port == 8080

    def test_values_read_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Secret and registration code come from the environment."""
        monkeypatch.setenv("JWT_SECRET_KEY", GOOD_SECRET)
        monkeypatch.setenv("REGISTRATION_CODE", "rotated-code")
        monkeypatch.setenv("STRICT_REORDER", "true")

        settings = Settings(_env_file=None)

        assert settings.jwt_secret_key == GOOD_SECRET
        assert settings.registration_code == "rotated-code"
        assert settings.strict_reorder is True


class TestRequiredValues:
    """Tests for values that have no default."""

    def test_missing_registration_code_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Registration code must be configured."""
        monkeypatch.delenv("REGISTRATION_CODE", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, jwt_secret_key=GOOD_SECRET)

    def test_missing_jwt_secret_fails(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Signing secret must be configured."""
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, registration_code="code")


class TestJwtSecretValidation:
    """Tests for signing secret strength checks."""

    def test_placeholder_secret_rejected(self) -> None:
        """The well-known placeholder secret is refused."""
        with pytest.raises(ValidationError, match="insecure placeholder"):
            make_settings(jwt_secret_key=INSECURE_DEFAULT_SECRET)

    def test_short_secret_rejected(self) -> None:
        """Secrets shorter than 32 characters are refused."""
        with pytest.raises(ValidationError, match="at least 32"):
            make_settings(jwt_secret_key="too-short")

    def test_32_character_secret_accepted(self) -> None:
        """A 32-character secret is the minimum accepted."""
        settings = make_settings(jwt_secret_key="x" * 32)
        assert settings.jwt_secret_key == "x" * 32


class TestCorsOriginsParsing:
    """Tests for CORS origins parsing from environment variables."""

    def test_parse_multiple_origins_comma_separated(self) -> None:
        """Multiple comma-separated origins are parsed correctly."""
        settings = make_settings(CORS_ORIGINS="http://localhost:8080,https://example.com")
        assert settings.cors_origins == ["http://localhost:8080", "https://example.com"]

    def test_parse_origins_with_whitespace_and_trailing_comma(self) -> None:
        """Whitespace is stripped and empty entries are dropped."""
        settings = make_settings(CORS_ORIGINS="  http://localhost:8080 , ")
        assert settings.cors_origins == ["http://localhost:8080"]

    def test_parse_empty_string(self) -> None:
        """Empty string results in empty list."""
        settings = make_settings(CORS_ORIGINS="")
        assert settings.cors_origins == []
