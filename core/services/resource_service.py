# =============================================================================
# core/services/resource_service.py - Team Resource Libraries
# =============================================================================
# One generic service drives all five resource kinds (personnel, equipment,
# locations, props, costumes). The kind selects the table and schemas from
# core.models.resource.RESOURCE_KINDS; every query is scoped by team_id so a
# row from another team is indistinguishable from a missing one.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.resource import ResourceKind, get_resource_spec
from app.exceptions import ResourceNotFoundError

logger = logging.getLogger(__name__)


class ResourceService:
    """
    CRUD for team resource libraries.

    Example:
        ResourceService.create(ResourceKind.PROPS, team_id, {"name": "Staff"})
        ResourceService.list(ResourceKind.PROPS, team_id)
    """

    @staticmethod
    def list(kind: ResourceKind | str, team_id: str) -> list[dict[str, Any]]:
        """All resources of a kind in the team, sorted by display name."""
        spec = get_resource_spec(kind)
        return SupabaseClient.fetch_many(spec.table, {"team_id": team_id}, order_by=spec.order_by)

    @staticmethod
    def get(kind: ResourceKind | str, resource_id: str, team_id: str) -> dict[str, Any]:
        """
        Raises:
            ResourceNotFoundError: If missing or owned by another team
        """
        spec = get_resource_spec(kind)
        row = SupabaseClient.fetch_one(spec.table, {"id": resource_id, "team_id": team_id})
        if not row:
            raise ResourceNotFoundError(spec.label, resource_id)
        return row

    @staticmethod
    def get_many(kind: ResourceKind | str, resource_ids: list[str], team_id: str) -> dict[str, dict[str, Any]]:
        """
        Fetch several resources of the team at once.

        Returns:
            {id: row} for the ids that exist in the team; others are absent
        """
        spec = get_resource_spec(kind)
        rows = SupabaseClient.fetch_many(
            spec.table,
            {"team_id": team_id},
            in_filter=("id", list(resource_ids)),
        )
        return {str(row["id"]): row for row in rows}

    @staticmethod
    def create(
        kind: ResourceKind | str,
        team_id: str,
        data: BaseModel | dict[str, Any],
    ) -> dict[str, Any]:
        """
        Create a resource in the team.

        Args:
            kind: Resource kind
            team_id: Owning team
            data: The kind's Create schema, or a raw dict validated against it
        """
        spec = get_resource_spec(kind)
        if not isinstance(data, spec.create_model):
            data = spec.create_model.model_validate(data)

        row = data.model_dump(mode="json")
        row["team_id"] = team_id

        created = SupabaseClient.insert_row(spec.table, row)
        logger.info(f"Created {spec.label} {created['id']} in team {team_id}")
        return created

    @staticmethod
    def update(
        kind: ResourceKind | str,
        resource_id: str,
        team_id: str,
        data: BaseModel | dict[str, Any],
    ) -> dict[str, Any]:
        """
        Partially update a resource. An empty update returns it unchanged.

        Raises:
            ResourceNotFoundError: If missing or owned by another team
        """
        spec = get_resource_spec(kind)
        if not isinstance(data, spec.update_model):
            data = spec.update_model.model_validate(data)

        updates = data.model_dump(mode="json", exclude_unset=True)
        if not updates:
            return ResourceService.get(kind, resource_id, team_id)

        updates["updated_at"] = utc_now_iso()
        rows = SupabaseClient.update_rows(spec.table, updates, {"id": resource_id, "team_id": team_id})
        if not rows:
            raise ResourceNotFoundError(spec.label, resource_id)
        return rows[0]

    @staticmethod
    def delete(kind: ResourceKind | str, resource_id: str, team_id: str) -> None:
        """
        Delete a resource and detach it from shoots.

        Raises:
            ResourceNotFoundError: If missing or owned by another team
        """
        # Imported here: association_service builds on ResourceService
        from core.services.association_service import LINK_TABLES
        from core.services.shoot_items_service import PARTICIPANTS_TABLE

        kind = ResourceKind(kind)
        spec = get_resource_spec(kind)

        # Confirms team ownership before touching link rows
        ResourceService.get(kind, resource_id, team_id)

        for link in LINK_TABLES.values():
            if link.resource_kind == kind:
                SupabaseClient.delete_rows(link.table, {link.column: resource_id})
        if kind == ResourceKind.PERSONNEL:
            SupabaseClient.update_rows(
                PARTICIPANTS_TABLE,
                {"personnel_id": None},
                {"personnel_id": resource_id},
            )

        deleted = SupabaseClient.delete_rows(spec.table, {"id": resource_id, "team_id": team_id})
        if not deleted:
            raise ResourceNotFoundError(spec.label, resource_id)
        logger.info(f"Deleted {spec.label} {resource_id} from team {team_id}")
