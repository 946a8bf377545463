"""
Ments API Configuration

Configuration management with environment variable support.
Implements secure defaults and validation for all settings.
"""

from functools import lru_cache
from typing import Dict

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.cache.value_objects import CacheDomain

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation and secure defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )
    SERVICE_NAME: str = Field(default="ments-api", description="Service name")
    SERVICE_VERSION: str = Field(default="0.1.0", description="Service version")

    # API configuration
    API_HOST: str = Field(default="0.0.0.0", description="API server host")
    API_PORT: int = Field(default=8000, ge=1, le=65535, description="API server port")

    # Response cache configuration
    CACHE_SWEEP_INTERVAL_SECONDS: float = Field(
        default=60.0,
        ge=1.0,
        le=3600.0,
        description="Seconds between background sweeps of expired entries",
    )
    CACHE_ADMIN_ENABLED: bool = Field(
        default=True, description="Mount the cache stats/invalidation endpoints"
    )
    CACHE_TTL_ENVIRONMENTS: int = Field(
        default=300, ge=1, le=86400, description="Environments listing TTL"
    )
    CACHE_TTL_COMPETITIONS: int = Field(
        default=120, ge=1, le=86400, description="Competitions listing TTL"
    )
    CACHE_TTL_RESOURCES: int = Field(
        default=120, ge=1, le=86400, description="Resources listing TTL"
    )
    CACHE_TTL_JOBS: int = Field(
        default=60, ge=1, le=86400, description="Jobs listing TTL"
    )
    CACHE_TTL_STARTUPS: int = Field(
        default=60, ge=1, le=86400, description="Startups listing TTL"
    )
    CACHE_TTL_TRENDING: int = Field(
        default=60, ge=1, le=86400, description="Trending posts TTL"
    )

    # Development and debugging
    DEBUG: bool = Field(default=False, description="Enable debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "staging", "production", "test"]
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return v.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cache_ttl_overrides(self) -> Dict[CacheDomain, int]:
        """Configured TTL seconds per listing domain."""
        return {
            CacheDomain.ENVIRONMENTS: self.CACHE_TTL_ENVIRONMENTS,
            CacheDomain.COMPETITIONS: self.CACHE_TTL_COMPETITIONS,
            CacheDomain.RESOURCES: self.CACHE_TTL_RESOURCES,
            CacheDomain.JOBS: self.CACHE_TTL_JOBS,
            CacheDomain.STARTUPS: self.CACHE_TTL_STARTUPS,
            CacheDomain.TRENDING: self.CACHE_TTL_TRENDING,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
