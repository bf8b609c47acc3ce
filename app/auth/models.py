# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from core.models.base import CamelModel


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None

    # user_metadata claim (names, avatar) used to seed the profile row
    metadata: dict[str, Any] = Field(default_factory=dict)


class SessionRequest(CamelModel):
    """
    Body of POST /api/auth/session.

    Sent by the client right after Supabase sign-in so the API can set
    httpOnly session cookies.
    """
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)

    # Unix timestamp (seconds) at which the access token expires
    expires_at: int = Field(..., gt=0)
