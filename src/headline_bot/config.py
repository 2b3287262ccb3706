"""Configuration management for Headline Bot.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files and
is overridden by command-line flags in `headline_bot.cli`.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the HEADLINE_BOT_ prefix (e.g., HEADLINE_BOT_DUMP_SERVICE_URL).
    """

    model_config = SettingsConfigDict(
        env_prefix="HEADLINE_BOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote services
    dump_service_url: str = Field(
        default="http://localhost:8826",
        description="Dump (store-and-forward inbox) service URL",
    )
    lookup_service_url: str = Field(
        default="http://localhost:8825",
        description="Legacy name lookup service URL",
    )
    blockchain_node_url: str = Field(
        default="http://localhost:8545",
        description="Registry endpoint consulted before the legacy lookup service",
    )
    use_legacy_lookup_service: bool = Field(
        default=False,
        description="Resolve names through the legacy lookup service only",
    )
    connect_timeout: float = Field(
        default=5.0,
        description="Timeout for every dump/lookup request in seconds",
    )

    # Identities
    key_files: list[Path] = Field(
        default_factory=list,
        description="PEM private key files, one per identity; the file stem is the identity name",
    )
    key_password: str | None = Field(
        default=None,
        description="Password protecting the key files, if any",
    )

    # Scheduling
    poll_interval: float = Field(
        default=5.0,
        description="Seconds between inbox poll cycles",
    )
    refresh_interval: float = Field(
        default=600.0,
        description="Seconds between headline cache refreshes",
    )

    # Headlines
    feed_url: str = Field(
        default="http://rss.cnn.com/rss/edition_world.rss",
        description="RSS feed the headline cache is refreshed from",
    )
    article_ttl: float = Field(
        default=24 * 60 * 60,
        description="Seconds an article stays in the cache after it was first seen",
    )

    # Replies
    mail_domain: str = Field(
        default="ubikom.cc",
        description="Domain appended to identity names in digest From addresses",
    )
    article_sender_name: str = Field(
        default="Ubikom War Info",
        description="Display name of the identity articles are delivered from",
    )
    article_sender_address: str = Field(
        default="war-info@ubikom.cc",
        description="Address articles are delivered from",
    )
    gateway_name: str = Field(
        default="gateway",
        description="Name of the mail gateway identity",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
