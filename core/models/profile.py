# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# One user_profiles row per auth user, created on first sign-in from the
# auth metadata. Holds display data and the active team pointer.
# =============================================================================

from pydantic import Field

from .base import CamelModel


class ProfileUpdate(CamelModel):
    """
    Input for PATCH /api/user/profile.

    Email and active team are not editable here: email belongs to Supabase
    Auth, the active team has its own endpoint.
    """

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = None
