"""Application configuration using pydantic-settings."""
from functools import lru_cache

from fastapi import Request
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Placeholder secret shipped by earlier deployments; never accepted.
INSECURE_DEFAULT_SECRET = "your-secret-key-change-this-in-production"
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./bookmarks.db"
    auto_create_tables: bool = True

    # Session tokens
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"

    # Invite code required to register a new account
    registration_code: str

    # Reject reorder requests that aren't the owner's full, duplicate-free id set
    strict_reorder: bool = False

    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:8080",
        validation_alias="CORS_ORIGINS",
    )

    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """
        Refuse weak token-signing secrets.

        Anyone holding the secret can mint tokens for any account, so the
        well-known placeholder and short keys are rejected at startup.
        """
        if self.jwt_secret_key == INSECURE_DEFAULT_SECRET:
            raise ValueError(
                "JWT_SECRET_KEY is set to the insecure placeholder value. "
                "Generate a random secret (e.g. `openssl rand -hex 32`).",
            )
        if len(self.jwt_secret_key) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters "
                f"(got {len(self.jwt_secret_key)}).",
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


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the running app was built with."""
    return request.app.state.settings
