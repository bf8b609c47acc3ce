# =============================================================================
# core/services/profile_service.py - User Profile Business Logic
# =============================================================================
# Reads and writes user_profiles rows. A row is created on first sign-in
# from the Supabase Auth user metadata; afterwards it carries display data
# and the active team pointer.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now_iso
from core.models.profile import ProfileUpdate
from app.exceptions import ProfileNotFoundError

logger = logging.getLogger(__name__)

TABLE = "user_profiles"


def _names_from_metadata(metadata: dict[str, Any]) -> tuple[str | None, str | None]:
    """
    Pull first/last name out of auth metadata.

    Email sign-ups send first_name/last_name; OAuth providers send
    full_name or name (Google also sends given_name/family_name).
    """
    first = (
        metadata.get("first_name")
        or metadata.get("firstName")
        or metadata.get("given_name")
    )
    last = (
        metadata.get("last_name")
        or metadata.get("lastName")
        or metadata.get("family_name")
    )
    if not first:
        full_name = metadata.get("full_name") or metadata.get("name")
        if full_name:
            parts = str(full_name).strip().split(" ", 1)
            first = parts[0] or None
            if not last and len(parts) > 1:
                last = parts[1].strip() or None
    return first, last


class ProfileService:
    """
    Service for user profile operations.

    Profiles are keyed by the auth user id (user_id column), not by the
    row id.
    """

    @staticmethod
    def get_profile(user_id: UUID | str) -> dict[str, Any] | None:
        """Get a user's profile row, or None if it doesn't exist yet."""
        return SupabaseClient.fetch_one(TABLE, {"user_id": normalize_uuid(user_id)})

    @staticmethod
    def ensure_profile(
        user_id: UUID | str,
        email: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Return the user's profile, creating it from auth metadata if missing.

        Args:
            user_id: Auth user id (JWT sub)
            email: Email from the token
            metadata: user_metadata claim from the token

        Returns:
            Profile row dict
        """
        existing = ProfileService.get_profile(user_id)
        if existing:
            return existing

        metadata = metadata or {}
        first_name, last_name = _names_from_metadata(metadata)

        profile = SupabaseClient.insert_row(TABLE, {
            "user_id": normalize_uuid(user_id),
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "avatar_url": metadata.get("avatar_url") or metadata.get("picture"),
        })
        logger.info(f"Created profile for user: {user_id}")
        return profile

    @staticmethod
    def update_profile(user_id: UUID | str, data: ProfileUpdate) -> dict[str, Any]:
        """
        Update editable profile fields.

        Raises:
            ProfileNotFoundError: If the user has no profile row
        """
        profile = ProfileService.get_profile(user_id)
        if not profile:
            raise ProfileNotFoundError(str(user_id))

        updates = data.model_dump(mode="json", exclude_unset=True)
        if not updates:
            return profile

        updates["updated_at"] = utc_now_iso()
        rows = SupabaseClient.update_rows(TABLE, updates, {"user_id": normalize_uuid(user_id)})
        return rows[0] if rows else {**profile, **updates}

    @staticmethod
    def set_active_team_id(user_id: UUID | str, team_id: str | None) -> None:
        """
        Point the profile at a team.

        Inserts a minimal profile when the user has none yet, so the choice
        is never lost.
        """
        user_id = normalize_uuid(user_id)
        rows = SupabaseClient.update_rows(
            TABLE,
            {"active_team_id": team_id, "updated_at": utc_now_iso()},
            {"user_id": user_id},
        )
        if not rows:
            SupabaseClient.insert_row(TABLE, {"user_id": user_id, "active_team_id": team_id})
        logger.debug(f"Active team for {user_id} set to {team_id}")
