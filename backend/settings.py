"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() so the environment is only read once per process.

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    print(settings.plan_api_url)

    # Tests: build settings without touching the environment/.env
    settings = Settings(environment="test", _env_file=None)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )

    # -------------------------------------------------------------------------
    # Plan backend
    # -------------------------------------------------------------------------
    plan_api_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the plan backend REST API",
    )
    plan_api_token: Optional[str] = Field(
        default=None,
        description="Bearer token for the plan backend",
    )
    plan_api_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Request timeout for plan backend calls",
    )

    # -------------------------------------------------------------------------
    # Exercise catalog
    # -------------------------------------------------------------------------
    catalog_api_url: Optional[str] = Field(
        default=None,
        description="Base URL of the exercise catalog (defaults to plan_api_url)",
    )

    # -------------------------------------------------------------------------
    # Plan cache
    # -------------------------------------------------------------------------
    microcycle_cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0,
        description="TTL for cached microcycle trees",
    )
    catalog_cache_ttl_seconds: float = Field(
        default=1800.0,
        ge=0,
        description="TTL for cached exercise catalog entries",
    )
    student_cache_ttl_seconds: float = Field(
        default=300.0,
        ge=0,
        description="TTL for cached student mesocycle lists",
    )
    cache_max_entries: int = Field(
        default=500,
        ge=1,
        description="Maximum number of entries kept in the plan cache",
    )

    # -------------------------------------------------------------------------
    # Cloning
    # -------------------------------------------------------------------------
    default_days_per_week: int = Field(
        default=4,
        ge=1,
        le=7,
        description="Days in an empty microcycle skeleton when none is given",
    )
    clone_synthesize_missing_sets: bool = Field(
        default=True,
        description="Create default sets when copying an exercise that has none",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("plan_api_url", "catalog_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().rstrip("/")
        return v or None

    @model_validator(mode="after")
    def require_plan_api_url(self) -> "Settings":
        if not self.plan_api_url:
            raise ValueError("plan_api_url must not be empty")
        return self

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def effective_catalog_api_url(self) -> str:
        """Catalog URL, falling back to the plan backend."""
        return self.catalog_api_url or self.plan_api_url

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Engine settings instance
    """
    return Settings()
