"""Tests for settings loading and validation."""

import pytest

from tuning_catalog.core.config import Settings, validate_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(SANITY_PROJECT_ID="abc123")
        assert settings.sanity_dataset == "production"
        assert settings.default_currency == "SEK"
        assert settings.rate_limit == "60/minute"

    def test_validate_ok(self):
        validate_settings(Settings(SANITY_PROJECT_ID="abc123"))

    def test_validate_missing_project(self):
        with pytest.raises(ValueError, match="SANITY_PROJECT_ID is required"):
            validate_settings(Settings(SANITY_PROJECT_ID=""))

    def test_cors_origins_list(self):
        settings = Settings(ALLOWED_ORIGINS=["https://a.example", "https://b.example"])
        assert settings.cors_origins == ["https://a.example", "https://b.example"]
