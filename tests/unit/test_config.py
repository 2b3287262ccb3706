"""Unit tests for configuration module."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from headline_bot.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.poll_interval == 5.0
        assert settings.refresh_interval == 600.0
        assert settings.connect_timeout == 5.0
        assert settings.article_ttl == 24 * 60 * 60
        assert settings.gateway_name == "gateway"
        assert settings.use_legacy_lookup_service is False
        assert settings.key_files == []
        assert settings.log_level == "INFO"

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("HEADLINE_BOT_DUMP_SERVICE_URL", "http://dump:9000")
        monkeypatch.setenv("HEADLINE_BOT_USE_LEGACY_LOOKUP_SERVICE", "true")
        monkeypatch.setenv("HEADLINE_BOT_KEY_FILES", '["keys/news.key", "keys/war.key"]')

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.dump_service_url == "http://dump:9000"
        assert settings.use_legacy_lookup_service is True
        assert settings.key_files == [Path("keys/news.key"), Path("keys/war.key")]

        # Clean up
        get_settings.cache_clear()

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()

    def test_log_level_is_normalized(self) -> None:
        """Test that log levels are accepted in any case."""
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self) -> None:
        """Test that an unknown log level fails validation."""
        with pytest.raises(ValidationError):
            Settings(log_level="loud")
