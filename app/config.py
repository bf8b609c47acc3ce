# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Usage:
#   from app.config import settings
#   bucket = settings.STORAGE_BUCKET
#
# Values come from the process environment, then .env in the working
# directory. Only the Supabase values are required. Every integration (Google, Resend,
# Mapbox) is optional; the matching endpoints answer 503 until configured.
# =============================================================================

import json
import logging
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Shoot Planner settings.

    Names match the environment variables exactly (case-sensitive). Empty
    variables count as unset, so `RESEND_API_KEY=` in .env leaves email
    disabled instead of configured with a blank key.
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

    SUPABASE_JWT_SECRET: str = Field(
        ...,
        description="Supabase legacy JWT secret used to verify HS256 access tokens"
    )

    STORAGE_BUCKET: str = Field(
        default="uploads",
        description="Supabase Storage bucket for uploaded images"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Google Integrations (Calendar, Docs, Places)
    # -------------------------------------------------------------------------

    GOOGLE_SERVICE_ACCOUNT: str | None = Field(
        default=None,
        description="Service account key as a JSON string (Calendar + Docs)"
    )

    GOOGLE_CALENDAR_ID: str = Field(
        default="primary",
        description="Calendar that shoot events are written to"
    )

    GOOGLE_MAPS_API_KEY: str | None = Field(
        default=None,
        description="API key for Google Places autocomplete/details"
    )

    # -------------------------------------------------------------------------
    # Other Integrations
    # -------------------------------------------------------------------------

    MAPBOX_ACCESS_TOKEN: str | None = Field(
        default=None,
        description="Mapbox token for forward geocoding"
    )

    RESEND_API_KEY: str | None = Field(
        default=None,
        description="Resend API key for reminder emails"
    )

    RESEND_FROM_EMAIL: str | None = Field(
        default=None,
        description="Sender address for reminder emails"
    )

    # -------------------------------------------------------------------------
    # Shoot Defaults
    # -------------------------------------------------------------------------

    DEFAULT_SHOOT_DURATION_MINUTES: int = Field(
        default=120,
        ge=15,
        le=24 * 60,
        description="Calendar event length when a shoot has no duration"
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
        default="http://localhost:3000,http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp,image/gif",
        description="Allowed upload content types (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
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
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_types_list(self) -> list[str]:
        """Parse ALLOWED_IMAGE_TYPES into a list of lowercase MIME types."""
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_upload_size_bytes(self) -> int:
        """
        Convert MB to bytes for file size validation.
        """
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def google_service_account_info(self) -> dict[str, Any] | None:
        """
        Parse GOOGLE_SERVICE_ACCOUNT JSON.

        Returns None when unset or not valid JSON (logged), so callers can
        report the integration as not configured.
        """
        if not self.GOOGLE_SERVICE_ACCOUNT:
            return None
        try:
            info = json.loads(self.GOOGLE_SERVICE_ACCOUNT)
        except json.JSONDecodeError as e:
            logger.warning(f"GOOGLE_SERVICE_ACCOUNT is not valid JSON: {e}")
            return None
        return info if isinstance(info, dict) else None

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
    """Settings parsed once per process. Tests monkeypatch attributes on it."""
    return Settings()


settings = get_settings()
