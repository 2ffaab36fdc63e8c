"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Cache is optional: leaving REDIS_URL unset runs the service uncached

Usage:
    from hostdetail.core.config import settings

    ttl = settings.geo_cache_ttl_seconds
    if settings.cache_enabled:
        ...
"""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hostdetail.core.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DNS_TIMEOUT_DEFAULT,
    GEO_TIMEOUT_DEFAULT,
    USER_AGENT_TALLY_MAX_ENTRIES,
)
from hostdetail.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. Default values (every setting has a safe default)

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.PRODUCTION,
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (detailed errors)",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Server bind host",
    )
    port: int = Field(
        default=3000,
        description="Server bind port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    instance_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("INSTANCE_ID", "HOSTNAME"),
        description="Instance identifier attached to every log line. Defaults to hostname.",
    )

    # Application metadata
    app_name: str = Field(
        default="hostdetail",
        description="Service name attached to every log line",
    )
    app_version: str = Field(
        default="1.0.0",
        validation_alias=AliasChoices("APP_VERSION", "SERVICE_VERSION"),
        description="Service version attached to every log line",
    )

    # Cache configuration (Redis)
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (e.g., redis://host:port/db). Unset disables caching.",
    )
    cache_key_prefix: str = Field(
        default="",
        description="Optional prefix prepended to every cache key",
    )
    cache_socket_timeout_seconds: float = Field(
        default=0.5,
        description="Redis connect/read timeout; keeps a slow cache off the response path",
    )
    cache_retry_cooldown_seconds: float = Field(
        default=5.0,
        description="Seconds the cache stays bypassed after a connection failure",
    )
    dns_cache_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        description="TTL of cached reverse-DNS names",
    )
    geo_cache_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        description="TTL of cached geolocation records",
    )

    # Enrichment backends
    dns_timeout_seconds: float = Field(
        default=DNS_TIMEOUT_DEFAULT,
        description="Deadline for one reverse-DNS lookup",
    )
    geo_timeout_seconds: float = Field(
        default=GEO_TIMEOUT_DEFAULT,
        description="Hard deadline for one geolocation lookup",
    )
    geo_api_base_url: str = Field(
        default="http://ip-api.com",
        description="Geolocation API base URL (ip-api.com compatible)",
    )

    # User agent tally / metrics
    user_agent_tally_max_entries: int = Field(
        default=USER_AGENT_TALLY_MAX_ENTRIES,
        description="Distinct user agents kept before least-recently-seen eviction",
    )
    metrics_interval_seconds: float = Field(
        default=60.0,
        description="Interval of the periodic metrics log line (0 disables)",
    )

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize and validate the log level name.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level name.

        Raises:
            ValueError: If the name is not a standard logging level.
        """
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"log_level must be a standard level name, got {v!r}")
        return level

    @field_validator(
        "dns_cache_ttl_seconds",
        "geo_cache_ttl_seconds",
        "dns_timeout_seconds",
        "geo_timeout_seconds",
        "user_agent_tally_max_entries",
    )
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """
        Reject zero or negative TTLs, timeouts and limits.

        Args:
            v: Value to check.

        Returns:
            Validated value.

        Raises:
            ValueError: If the value is not strictly positive.
        """
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("geo_api_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    @field_validator("redis_url")
    @classmethod
    def blank_redis_url_is_none(cls, v: str | None) -> str | None:
        """
        Treat an empty REDIS_URL as "cache disabled".

        Args:
            v: Raw URL value.

        Returns:
            URL, or None when blank.
        """
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def cache_enabled(self) -> bool:
        """
        Check whether a cache backend is configured.

        Returns:
            bool: True when REDIS_URL is set.
        """
        return self.redis_url is not None

    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache so settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
