# =============================================================================
# core/services/shoot_items_service.py - Participants & References
# =============================================================================
# Child rows of a single shoot. Every method takes a shoot_id the caller has
# already verified against the active team (ShootService.get_shoot), and
# rejects child rows whose shoot_id points elsewhere.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.resource import ResourceKind
from core.models.shoot_items import (
    ParticipantCreate,
    ParticipantUpdate,
    ReferenceCreate,
    ReferenceUpdate,
)
from core.services.resource_service import ResourceService
from app.exceptions import ParticipantNotFoundError, ReferenceNotFoundError

logger = logging.getLogger(__name__)

PARTICIPANTS_TABLE = "shoot_participants"
REFERENCES_TABLE = "shoot_references"


class ParticipantService:
    """People attending a shoot."""

    @staticmethod
    def list(shoot_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many(PARTICIPANTS_TABLE, {"shoot_id": shoot_id}, order_by="created_at")

    @staticmethod
    def get(shoot_id: str, participant_id: str) -> dict[str, Any]:
        """
        Raises:
            ParticipantNotFoundError: Missing, or attached to another shoot
        """
        row = SupabaseClient.fetch_one(PARTICIPANTS_TABLE, {"id": participant_id})
        if not row or str(row.get("shoot_id")) != str(shoot_id):
            raise ParticipantNotFoundError(participant_id)
        return row

    @staticmethod
    def create(shoot_id: str, team_id: str, data: ParticipantCreate) -> dict[str, Any]:
        """
        Add a participant.

        A personnel_id must reference personnel in the same team.
        """
        if data.personnel_id:
            ResourceService.get(ResourceKind.PERSONNEL, data.personnel_id, team_id)

        row = data.model_dump(mode="json")
        row["shoot_id"] = shoot_id
        created = SupabaseClient.insert_row(PARTICIPANTS_TABLE, row)
        logger.debug(f"Added participant {created['id']} to shoot {shoot_id}")
        return created

    @staticmethod
    def update(
        shoot_id: str,
        team_id: str,
        participant_id: str,
        data: ParticipantUpdate,
    ) -> dict[str, Any]:
        participant = ParticipantService.get(shoot_id, participant_id)

        updates = data.model_dump(mode="json", exclude_unset=True)
        if not updates:
            return participant
        if updates.get("personnel_id"):
            ResourceService.get(ResourceKind.PERSONNEL, updates["personnel_id"], team_id)

        rows = SupabaseClient.update_rows(
            PARTICIPANTS_TABLE,
            updates,
            {"id": participant_id, "shoot_id": shoot_id},
        )
        return rows[0] if rows else {**participant, **updates}

    @staticmethod
    def delete(shoot_id: str, participant_id: str) -> None:
        ParticipantService.get(shoot_id, participant_id)
        SupabaseClient.delete_rows(PARTICIPANTS_TABLE, {"id": participant_id, "shoot_id": shoot_id})


class ReferenceService:
    """Inspiration images and links attached to a shoot."""

    @staticmethod
    def list(shoot_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many(REFERENCES_TABLE, {"shoot_id": shoot_id}, order_by="created_at")

    @staticmethod
    def get(shoot_id: str, reference_id: str) -> dict[str, Any]:
        row = SupabaseClient.fetch_one(REFERENCES_TABLE, {"id": reference_id})
        if not row or str(row.get("shoot_id")) != str(shoot_id):
            raise ReferenceNotFoundError(reference_id)
        return row

    @staticmethod
    def create(shoot_id: str, data: ReferenceCreate) -> dict[str, Any]:
        row = data.model_dump(mode="json")
        row["shoot_id"] = shoot_id
        return SupabaseClient.insert_row(REFERENCES_TABLE, row)

    @staticmethod
    def update(shoot_id: str, reference_id: str, data: ReferenceUpdate) -> dict[str, Any]:
        reference = ReferenceService.get(shoot_id, reference_id)

        updates = data.model_dump(mode="json", exclude_unset=True)
        if not updates:
            return reference

        rows = SupabaseClient.update_rows(
            REFERENCES_TABLE,
            updates,
            {"id": reference_id, "shoot_id": shoot_id},
        )
        return rows[0] if rows else {**reference, **updates}

    @staticmethod
    def delete(shoot_id: str, reference_id: str) -> None:
        ReferenceService.get(shoot_id, reference_id)
        SupabaseClient.delete_rows(REFERENCES_TABLE, {"id": reference_id, "shoot_id": shoot_id})
