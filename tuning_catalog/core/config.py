"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to the project root (3 levels up from this file)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sanity content store
    sanity_project_id: str = Field(default="", validation_alias="SANITY_PROJECT_ID")
    sanity_dataset: str = Field(default="production", validation_alias="SANITY_DATASET")
    sanity_api_version: str = Field(
        default="2025-04-23", validation_alias="SANITY_API_VERSION"
    )
    sanity_token: str = Field(default="", validation_alias="SANITY_TOKEN")
    sanity_use_cdn: bool = Field(default=False, validation_alias="SANITY_USE_CDN")
    sanity_timeout: float = Field(default=15.0, validation_alias="SANITY_TIMEOUT")

    # Reseller defaults
    default_currency: str = Field(default="SEK", validation_alias="DEFAULT_CURRENCY")
    default_language: str = Field(default="sv", validation_alias="DEFAULT_LANGUAGE")

    # API settings
    api_admin_key: str = Field(default="", validation_alias="API_ADMIN_KEY")
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000"],
        validation_alias="ALLOWED_ORIGINS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Rate limiting
    rate_limit: str = Field(default="60/minute", validation_alias="RATE_LIMIT")

    @property
    def cors_origins(self) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or return list."""
        if isinstance(self.allowed_origins, str):
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return self.allowed_origins


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def validate_settings(settings: Settings | None = None) -> None:
    """Validate that all required settings are present."""
    settings = settings or get_settings()
    errors = []

    if not settings.sanity_project_id:
        errors.append("SANITY_PROJECT_ID is required")
    if not settings.sanity_dataset:
        errors.append("SANITY_DATASET is required")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
