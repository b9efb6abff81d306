"""Configuration for Geocoding Gateway Service.

Uses Pydantic settings for environment-based configuration. The settings
object is built once at startup and injected wherever it is needed.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Defines application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # Service Identity
    SERVICE_NAME: str = Field(
        default="geocoding-gateway-service", description="Service identifier"
    )
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT, description="Runtime environment"
    )

    # HTTP server configuration
    HOST: str = Field(default="0.0.0.0", description="HTTP server host")
    PORT: int = Field(default=3000, description="HTTP server port")

    # Upstream geocoding service
    GEOCODING_SERVICE_URL: str = Field(
        default="http://localhost:5008",
        description="Base URL of the upstream geocoding service",
    )
    UPSTREAM_TIMEOUT_SECONDS: float | None = Field(
        default=None,
        description="Upstream request timeout; None keeps the httpx defaults",
    )

    # CORS Configuration
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed origins for CORS",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=False, description="Allow credentials in CORS")
    CORS_ALLOW_METHODS: list[str] = Field(
        default_factory=lambda: ["GET", "POST"],
        description="Allowed methods for CORS",
    )
    CORS_ALLOW_HEADERS: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed headers for CORS",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("GEOCODING_SERVICE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
