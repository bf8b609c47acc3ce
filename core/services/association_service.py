# =============================================================================
# core/services/association_service.py - Shoot <-> Resource Links
# =============================================================================
# Links team equipment, props and costumes to a shoot through the
# shoot_equipment / shoot_props / shoot_costumes tables, and rebuilds all of
# a shoot's links (plus its participants) in one call for the shoot editor.
#
# Every method takes a shoot row already verified against the active team.
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.resource import ResourceKind
from core.models.shoot_items import AssociationKind, ResourcesReplace
from core.services.resource_service import ResourceService
from core.services.shoot_items_service import PARTICIPANTS_TABLE
from app.exceptions import AssociationNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_PARTICIPANT_ROLE = "Participant"


@dataclass(frozen=True)
class LinkTable:
    table: str
    column: str
    resource_kind: ResourceKind
    has_quantity: bool = False


LINK_TABLES: dict[AssociationKind, LinkTable] = {
    AssociationKind.EQUIPMENT: LinkTable("shoot_equipment", "equipment_id", ResourceKind.EQUIPMENT, has_quantity=True),
    AssociationKind.PROPS: LinkTable("shoot_props", "prop_id", ResourceKind.PROPS),
    AssociationKind.COSTUMES: LinkTable("shoot_costumes", "costume_id", ResourceKind.COSTUMES),
}


def _unique(ids: list[str]) -> list[str]:
    """Drop duplicates and blanks, keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for value in ids:
        value = str(value).strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


class AssociationService:
    """
    Service for linking team resources to shoots.

    Example:
        AssociationService.add_association(shoot, AssociationKind.PROPS, prop_id)
        AssociationService.list_associated(shoot, AssociationKind.PROPS)
    """

    @staticmethod
    def list_associated(shoot: dict[str, Any], kind: AssociationKind | str) -> list[dict[str, Any]]:
        """
        Resources linked to the shoot, in link order.

        Equipment rows carry the per-shoot "quantity" from the link row
        (overriding the library quantity).
        """
        link = LINK_TABLES[AssociationKind(kind)]
        links = SupabaseClient.fetch_many(link.table, {"shoot_id": shoot["id"]}, order_by="created_at")
        if not links:
            return []

        resources = ResourceService.get_many(
            link.resource_kind,
            [row[link.column] for row in links],
            str(shoot["team_id"]),
        )

        result = []
        for row in links:
            resource = resources.get(str(row[link.column]))
            if not resource:
                continue
            if link.has_quantity:
                resource = {**resource, "quantity": row.get("quantity") or 1}
            result.append(resource)
        return result

    @staticmethod
    def add_association(
        shoot: dict[str, Any],
        kind: AssociationKind | str,
        resource_id: str,
        quantity: int = 1,
    ) -> dict[str, Any]:
        """
        Link a team resource to the shoot.

        Idempotent: an existing link is returned unchanged.

        Raises:
            ResourceNotFoundError: If the resource isn't in the shoot's team
        """
        link = LINK_TABLES[AssociationKind(kind)]
        ResourceService.get(link.resource_kind, resource_id, str(shoot["team_id"]))

        existing = SupabaseClient.fetch_one(link.table, {"shoot_id": shoot["id"], link.column: resource_id})
        if existing:
            return existing

        row: dict[str, Any] = {"shoot_id": shoot["id"], link.column: resource_id}
        if link.has_quantity:
            row["quantity"] = quantity

        created = SupabaseClient.insert_row(link.table, row)
        logger.debug(f"Linked {link.resource_kind.value} {resource_id} to shoot {shoot['id']}")
        return created

    @staticmethod
    def remove_association(shoot: dict[str, Any], kind: AssociationKind | str, resource_id: str) -> None:
        """
        Raises:
            AssociationNotFoundError: If the resource isn't linked to the shoot
        """
        link = LINK_TABLES[AssociationKind(kind)]
        deleted = SupabaseClient.delete_rows(link.table, {"shoot_id": shoot["id"], link.column: resource_id})
        if not deleted:
            raise AssociationNotFoundError(link.resource_kind.value, resource_id)

    @staticmethod
    def replace_resources(shoot: dict[str, Any], team_id: str, payload: ResourcesReplace) -> dict[str, Any]:
        """
        Rebuild every link and participant of a shoot.

        Steps:
        1. Replace equipment/prop/costume links with the given id lists
           (ids outside the team are skipped)
        2. Replace participants with payload.participants
        3. Add each personnel id not already used by a participant, with
           role "Participant"

        Returns:
            {success, equipment, props, costumes, participants} counts
        """
        shoot_id = shoot["id"]
        id_lists = {
            AssociationKind.EQUIPMENT: payload.equipment_ids,
            AssociationKind.PROPS: payload.prop_ids,
            AssociationKind.COSTUMES: payload.costume_ids,
        }

        counts: dict[str, Any] = {"success": True}

        # 1. Resource links
        for kind, ids in id_lists.items():
            link = LINK_TABLES[kind]
            SupabaseClient.delete_rows(link.table, {"shoot_id": shoot_id})

            ids = _unique(ids)
            valid = ResourceService.get_many(link.resource_kind, ids, team_id)
            created = 0
            for resource_id in ids:
                if resource_id not in valid:
                    logger.warning(f"Skipping {link.resource_kind.value} {resource_id}: not in team {team_id}")
                    continue
                row: dict[str, Any] = {"shoot_id": shoot_id, link.column: resource_id}
                if link.has_quantity:
                    row["quantity"] = 1
                SupabaseClient.insert_row(link.table, row)
                created += 1
            counts[kind.value] = created

        # 2. Explicit participants
        SupabaseClient.delete_rows(PARTICIPANTS_TABLE, {"shoot_id": shoot_id})

        personnel_ids = _unique(
            payload.personnel_ids
            + [p.personnel_id for p in payload.participants if p.personnel_id]
        )
        personnel = ResourceService.get_many(ResourceKind.PERSONNEL, personnel_ids, team_id)

        participant_count = 0
        referenced: set[str] = set()
        for participant in payload.participants:
            row = participant.model_dump(mode="json")
            if row.get("personnel_id") and row["personnel_id"] not in personnel:
                logger.warning(f"Dropping personnel link {row['personnel_id']}: not in team {team_id}")
                row["personnel_id"] = None
            if row.get("personnel_id"):
                referenced.add(row["personnel_id"])
            row["shoot_id"] = shoot_id
            SupabaseClient.insert_row(PARTICIPANTS_TABLE, row)
            participant_count += 1

        # 3. Personnel picked without participant details
        for personnel_id in _unique(payload.personnel_ids):
            if personnel_id in referenced:
                continue
            person = personnel.get(personnel_id)
            if not person:
                logger.warning(f"Skipping personnel {personnel_id}: not in team {team_id}")
                continue
            SupabaseClient.insert_row(PARTICIPANTS_TABLE, {
                "shoot_id": shoot_id,
                "personnel_id": personnel_id,
                "name": person.get("name"),
                "role": DEFAULT_PARTICIPANT_ROLE,
                "email": person.get("email"),
            })
            referenced.add(personnel_id)
            participant_count += 1

        counts["participants"] = participant_count
        logger.info(f"Replaced resources for shoot {shoot_id}: {counts}")
        return counts
