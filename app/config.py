# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Vendor credentials for Twilio, Stripe and Anthropic are optional. When they
# are missing the matching endpoints answer with a "not configured" error
# instead of the whole app refusing to start.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Anthropic / Business Analysis
    # -------------------------------------------------------------------------

    ANTHROPIC_API_KEY: str | None = Field(
        default=None,
        description="Anthropic API key (AI analysis is skipped when unset)"
    )

    ANTHROPIC_MODEL: str = Field(
        default="claude-3-5-sonnet-20241022",
        description="Model used to extract business profiles from websites"
    )

    ANTHROPIC_MAX_TOKENS: int = Field(
        default=1500,
        ge=256,
        le=8192,
        description="Max tokens for the business analysis response"
    )

    WEBSITE_FETCH_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        le=60,
        description="Seconds to wait when downloading a business website"
    )

    # -------------------------------------------------------------------------
    # Twilio (SMS)
    # -------------------------------------------------------------------------

    TWILIO_ACCOUNT_SID: str | None = Field(
        default=None,
        description="Twilio account SID"
    )

    TWILIO_AUTH_TOKEN: str | None = Field(
        default=None,
        description="Twilio auth token"
    )

    TWILIO_PHONE_NUMBER: str | None = Field(
        default=None,
        description="Sender number for outgoing SMS (E.164)"
    )

    SMS_SEND_INTERVAL_MS: int = Field(
        default=100,
        ge=0,
        le=10_000,
        description="Minimum gap between consecutive sends in a bulk batch"
    )

    # -------------------------------------------------------------------------
    # Stripe (Payments)
    # -------------------------------------------------------------------------

    STRIPE_SECRET_KEY: str | None = Field(
        default=None,
        description="Stripe secret API key"
    )

    STRIPE_WEBHOOK_SECRET: str | None = Field(
        default=None,
        description="Signing secret for the Stripe webhook endpoint"
    )

    # -------------------------------------------------------------------------
    # Business Record Store
    # -------------------------------------------------------------------------

    BUSINESS_STORE_BACKEND: Literal["memory", "supabase"] = Field(
        default="supabase",
        description="Where business profiles are kept"
    )

    SEED_DEMO_BUSINESS: bool = Field(
        default=True,
        description="Seed one demo business when the in-memory store is empty"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (production sets env vars directly)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def sms_configured(self) -> bool:
        """True when all Twilio credentials are present."""
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_PHONE_NUMBER
        )

    @property
    def sms_send_interval_seconds(self) -> float:
        return self.SMS_SEND_INTERVAL_MS / 1000

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
