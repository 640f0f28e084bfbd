"""
Configuration management using Pydantic Settings.

Type-safe, validated configuration loaded from environment variables (or an
optional .env file). Flat structure, no nesting.

Usage:
    from src.core.config import settings

    prefix = settings.api_v1_prefix
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

    Configuration precedence:
        1. Environment variables
        2. Values from .env (if present)
        3. Default values (only for non-sensitive config)
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
    host: str = Field(
        default="0.0.0.0",
        description="Server bind host",
    )
    port: int = Field(
        default=5001,
        description="Server bind port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="Cinema API",
        description="Application name (OpenAPI info.title)",
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version (OpenAPI/AsyncAPI info.version)",
    )
    app_description: str = Field(
        default="Comprehensive API documentation for the Cinema application",
        description="OpenAPI info.description",
    )

    # API configuration
    api_base_url: str = Field(
        default="http://localhost:5001",
        description="Public API base URL, used for RFC 7807 problem type URIs",
    )
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API v1 route prefix (also the OpenAPI server entry)",
    )
    openapi_output_path: str | None = Field(
        default=None,
        description="Write the generated OpenAPI document to this path at startup",
    )

    # WebSocket documentation
    websocket_title: str = Field(
        default="Cinema WebSocket API",
        description="AsyncAPI info.title",
    )
    websocket_description: str = Field(
        default="Real-time WebSocket API for cinema application",
        description="AsyncAPI info.description",
    )
    websocket_server_url: str = Field(
        default="ws://localhost:5001",
        description="Fallback WebSocket server URL when the request has no Host header",
    )
    websocket_path_prefix: str = Field(
        default="/ws",
        description="URL prefix under which WebSocket namespaces are served",
    )

    # Security configuration
    secret_key: str = Field(
        default="change-me-in-production-change-me-please",
        description="Secret key for JWT token signing (must be kept secure)",
    )
    algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    access_token_expire_minutes: int = Field(
        default=15,
        description="Access token expiration time in minutes",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_v1_prefix", "websocket_path_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """
        Normalize URL prefixes to a leading slash and no trailing slash.

        Args:
            v: Raw prefix value.

        Returns:
            str: Normalized prefix.
        """
        v = "/" + v.strip("/")
        return "" if v == "/" else v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate logging level.

        Args:
            v: Log level name.

        Returns:
            str: Upper-cased log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing or CI environment."""
        return self.environment in {Environment.TESTING, Environment.CI}

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application configuration.
    """
    return Settings()


settings = get_settings()
