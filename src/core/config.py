"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables. Docker compose specifies which .env file to use per environment.

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Every request-shaping layer (rate limit, response cache, analytics) can be
  switched off independently without a code change

Usage:
    from src.core.config import settings

    # Access config
    redis_url = settings.redis_url
    timeout = settings.redis_socket_timeout

    # Environment detection
    if settings.is_development:
        # Dev-specific behavior
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Loads configuration from environment variables.
    Docker compose specifies which .env file to use via env_file directive.

    Configuration precedence:
        1. Environment variables (set by Docker compose from .env files)
        2. Default values (only for non-sensitive config)

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )

    # Core application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, detailed errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Storefront Edge",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # API configuration
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="API base URL, used for RFC 7807 problem type URIs",
    )
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API v1 route prefix",
    )
    admin_api_token: str | None = Field(
        default=None,
        description="Shared token required by admin routes (X-Admin-Token header). "
        "Admin routes reject every request when unset.",
    )
    trust_forwarded_headers: bool = Field(
        default=True,
        description="Trust X-Forwarded-For / X-Real-IP from the reverse proxy "
        "when resolving the client address",
    )

    # Cache configuration (Redis)
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (e.g., redis://host:port/db)",
    )
    redis_max_connections: int = Field(
        default=50,
        description="Maximum connections in the shared Redis pool",
    )
    redis_socket_timeout: float = Field(
        default=2.0,
        description="Seconds before a Redis command is abandoned",
    )
    redis_connect_timeout: float = Field(
        default=2.0,
        description="Seconds before a Redis connection attempt is abandoned",
    )

    # Feature switches
    rate_limit_enabled: bool = Field(
        default=True,
        description="Apply fixed-window rate limit tiers to bound routes",
    )
    response_cache_enabled: bool = Field(
        default=True,
        description="Serve and store cached GET responses",
    )
    analytics_enabled: bool = Field(
        default=True,
        description="Record page views, user actions and business events",
    )

    # Analytics retention
    analytics_counter_ttl_days: int = Field(
        default=30,
        description="Days a daily/hourly analytics counter is retained",
    )
    analytics_recent_ttl_seconds: int = Field(
        default=3600,
        description="Seconds a recent page view / action snapshot is retained",
    )
    analytics_event_ttl_days: int = Field(
        default=7,
        description="Days a business event snapshot is retained",
    )

    model_config = SettingsConfigDict(
        # env_file handled by Docker compose (not coupled to specific environment)
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_base_url")
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

    @field_validator("redis_socket_timeout", "redis_connect_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """
        Require a finite, positive Redis timeout.

        A store call that never returns would hold the request forever, so
        an unbounded (zero or negative) timeout is rejected.

        Args:
            v: Timeout in seconds.

        Returns:
            float: Validated timeout.

        Raises:
            ValueError: If timeout is not positive.
        """
        if v <= 0:
            raise ValueError("Redis timeouts must be positive")
        return v

    @field_validator(
        "analytics_counter_ttl_days",
        "analytics_recent_ttl_seconds",
        "analytics_event_ttl_days",
    )
    @classmethod
    def validate_retention(cls, v: int) -> int:
        """
        Validate analytics retention values are positive.

        Args:
            v: Retention value.

        Returns:
            int: Validated retention.

        Raises:
            ValueError: If retention is not positive.
        """
        if v <= 0:
            raise ValueError("Analytics retention must be positive")
        return v

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """
        Check if running in CI environment.

        Returns:
            bool: True if environment is CI, False otherwise.
        """
        return self.environment == Environment.CI

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

    Uses lru_cache to ensure settings are loaded only once per process.
    This is important for performance and consistency.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()


# Global settings instance (singleton pattern)
settings = get_settings()
