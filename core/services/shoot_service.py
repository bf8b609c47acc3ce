# =============================================================================
# core/services/shoot_service.py - Shoot Business Logic
# =============================================================================
# Handles shoot CRUD operations and business logic.
# Separates HTTP concerns from database/business logic.
#
# Every query filters on team_id: a shoot in another team is reported as
# not found, never as forbidden.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.resource import ResourceKind
from core.models.shoot import ShootCreate, ShootUpdate, normalize_status
from core.models.shoot_items import AssociationKind
from core.services.association_service import LINK_TABLES, AssociationService
from core.services.resource_service import ResourceService
from core.services.shoot_items_service import (
    PARTICIPANTS_TABLE,
    REFERENCES_TABLE,
    ParticipantService,
    ReferenceService,
)
from app.exceptions import ShootNotFoundError

logger = logging.getLogger(__name__)

TABLE = "shoots"

# Never writable through update_shoot
_IMMUTABLE_FIELDS = ("id", "team_id", "user_id", "created_at")


class ShootService:
    """
    Service for shoot management operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_shoots(team_id: str, status: str | None = None) -> list[dict[str, Any]]:
        """
        List the team's shoots, newest first.

        Args:
            team_id: Active team
            status: Optional status filter (normalized like request input)
        """
        filters: dict[str, Any] = {"team_id": team_id}
        if status:
            filters["status"] = normalize_status(status)
        return SupabaseClient.fetch_many(TABLE, filters, order_by="created_at", desc=True)

    @staticmethod
    def get_shoot(shoot_id: str, team_id: str) -> dict[str, Any]:
        """
        Get a shoot by ID.

        Raises:
            ShootNotFoundError: If the shoot doesn't exist or belongs to another team
        """
        shoot = SupabaseClient.fetch_one(TABLE, {"id": shoot_id, "team_id": team_id})
        if not shoot:
            raise ShootNotFoundError(shoot_id)
        return shoot

    @staticmethod
    def create_shoot(team_id: str, user_id: str, data: ShootCreate) -> dict[str, Any]:
        """
        Create a shoot in the team.

        Raises:
            ResourceNotFoundError: If location_id isn't a team location
        """
        row = data.model_dump(mode="json")
        if row.get("location_id"):
            ResourceService.get(ResourceKind.LOCATIONS, row["location_id"], team_id)

        row["team_id"] = team_id
        row["user_id"] = str(user_id)

        shoot = SupabaseClient.insert_row(TABLE, row)
        logger.info(f"Created shoot: {shoot['id']} in team: {team_id}")
        return shoot

    @staticmethod
    def update_shoot(
        shoot_id: str,
        team_id: str,
        data: ShootUpdate | dict[str, Any],
    ) -> dict[str, Any]:
        """
        Partially update a shoot.

        Args:
            shoot_id: The shoot UUID
            team_id: Active team
            data: ShootUpdate, or a dict of already-validated snake_case columns
                  (used internally by the calendar/docs integrations)

        Returns:
            Updated shoot dict (unchanged shoot when there is nothing to write)

        Raises:
            ShootNotFoundError: If the shoot doesn't exist in the team
        """
        if isinstance(data, ShootUpdate):
            updates = data.model_dump(mode="json", exclude_unset=True)
        else:
            updates = dict(data)

        for field in _IMMUTABLE_FIELDS:
            updates.pop(field, None)

        if not updates:
            return ShootService.get_shoot(shoot_id, team_id)

        if updates.get("location_id"):
            ResourceService.get(ResourceKind.LOCATIONS, updates["location_id"], team_id)

        updates["updated_at"] = utc_now_iso()
        rows = SupabaseClient.update_rows(TABLE, updates, {"id": shoot_id, "team_id": team_id})
        if not rows:
            raise ShootNotFoundError(shoot_id)

        logger.debug(f"Updated shoot {shoot_id}: {sorted(updates)}")
        return rows[0]

    @staticmethod
    def delete_shoot(shoot_id: str, team_id: str) -> None:
        """
        Delete a shoot with its links, participants and references.

        Raises:
            ShootNotFoundError: If nothing was deleted
        """
        # Ownership check first: child rows are only filtered by shoot_id
        ShootService.get_shoot(shoot_id, team_id)

        for link in LINK_TABLES.values():
            SupabaseClient.delete_rows(link.table, {"shoot_id": shoot_id})
        SupabaseClient.delete_rows(PARTICIPANTS_TABLE, {"shoot_id": shoot_id})
        SupabaseClient.delete_rows(REFERENCES_TABLE, {"shoot_id": shoot_id})

        deleted = SupabaseClient.delete_rows(TABLE, {"id": shoot_id, "team_id": team_id})
        if not deleted:
            raise ShootNotFoundError(shoot_id)
        logger.info(f"Deleted shoot: {shoot_id}")

    @staticmethod
    def get_shoot_details(shoot_id: str, team_id: str) -> dict[str, Any]:
        """
        Everything needed to render (or export) one shoot.

        Returns:
            {
                "shoot": {...},
                "location": {...} | None,
                "participants": [...],
                "references": [...],
                "equipment": [...],   # each with per-shoot "quantity"
                "props": [...],
                "costumes": [...],
            }
        """
        shoot = ShootService.get_shoot(shoot_id, team_id)

        location = None
        if shoot.get("location_id"):
            location = SupabaseClient.fetch_one(
                "locations",
                {"id": shoot["location_id"], "team_id": team_id},
            )

        return {
            "shoot": shoot,
            "location": location,
            "participants": ParticipantService.list(shoot_id),
            "references": ReferenceService.list(shoot_id),
            "equipment": AssociationService.list_associated(shoot, AssociationKind.EQUIPMENT),
            "props": AssociationService.list_associated(shoot, AssociationKind.PROPS),
            "costumes": AssociationService.list_associated(shoot, AssociationKind.COSTUMES),
        }
