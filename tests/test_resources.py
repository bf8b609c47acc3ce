# =============================================================================
# tests/test_resources.py - Resource & Association Tests
# =============================================================================
# Tests for:
# - Generic resource CRUD across kinds, scoped by team
# - Linking resources to shoots
# - replace_resources rebuilding links and participants
# =============================================================================

import pytest

from app.exceptions import AssociationNotFoundError, ResourceNotFoundError
from core.models.resource import ResourceKind
from core.models.shoot_items import AssociationKind, ResourcesReplace
from core.services.association_service import LINK_TABLES, AssociationService
from core.services.resource_service import ResourceService


@pytest.fixture
def shoot(fake_db, team_ctx):
    return fake_db.add("shoots", {"team_id": team_ctx.team_id, "title": "Frieren", "status": "idea"})


# =============================================================================
# ResourceService
# =============================================================================

class TestResourceService:
    def test_create_and_list_sorted(self, fake_db, team_ctx):
        ResourceService.create(ResourceKind.COSTUMES, team_ctx.team_id, {"characterName": "Stark"})
        ResourceService.create(ResourceKind.COSTUMES, team_ctx.team_id, {"characterName": "Fern"})

        names = [c["character_name"] for c in ResourceService.list("costumes", team_ctx.team_id)]

        assert names == ["Fern", "Stark"]

    def test_list_is_team_scoped(self, fake_db, team_ctx):
        other = fake_db.add("teams", {"name": "Other"})
        fake_db.add("props", {"team_id": other["id"], "name": "Not ours"})

        assert ResourceService.list(ResourceKind.PROPS, team_ctx.team_id) == []

    def test_get_other_team_is_404(self, fake_db, team_ctx):
        other = fake_db.add("teams", {"name": "Other"})
        prop = fake_db.add("props", {"team_id": other["id"], "name": "Not ours"})

        with pytest.raises(ResourceNotFoundError) as exc_info:
            ResourceService.get(ResourceKind.PROPS, prop["id"], team_ctx.team_id)
        assert exc_info.value.code == "PROP_NOT_FOUND"

    def test_update_partial(self, fake_db, team_ctx):
        item = ResourceService.create(ResourceKind.EQUIPMENT, team_ctx.team_id, {"name": "AD200", "category": "Lighting"})

        updated = ResourceService.update(ResourceKind.EQUIPMENT, item["id"], team_ctx.team_id, {"quantity": 3})

        assert updated["quantity"] == 3
        assert updated["name"] == "AD200"

    def test_delete_detaches_from_shoots(self, fake_db, team_ctx, shoot):
        prop = ResourceService.create(ResourceKind.PROPS, team_ctx.team_id, {"name": "Staff"})
        fake_db.add("shoot_props", {"shoot_id": shoot["id"], "prop_id": prop["id"]})

        ResourceService.delete(ResourceKind.PROPS, prop["id"], team_ctx.team_id)

        assert fake_db.rows("props") == []
        assert fake_db.rows("shoot_props") == []

    @pytest.mark.parametrize("link", list(LINK_TABLES.values()), ids=lambda link: link.table)
    def test_delete_clears_every_link_table(self, fake_db, team_ctx, shoot, link):
        body = {"characterName": "Frieren"} if link.resource_kind == ResourceKind.COSTUMES else {"name": "Item", "category": "Misc"}
        resource = ResourceService.create(link.resource_kind, team_ctx.team_id, body)
        fake_db.add(link.table, {"shoot_id": shoot["id"], link.column: resource["id"]})

        ResourceService.delete(link.resource_kind, resource["id"], team_ctx.team_id)

        assert fake_db.rows(link.table) == []

    def test_delete_personnel_keeps_participant(self, fake_db, team_ctx, shoot):
        person = ResourceService.create(ResourceKind.PERSONNEL, team_ctx.team_id, {"name": "Ana"})
        fake_db.add("shoot_participants", {"shoot_id": shoot["id"], "personnel_id": person["id"], "name": "Ana", "role": "Model"})

        ResourceService.delete(ResourceKind.PERSONNEL, person["id"], team_ctx.team_id)

        participant = fake_db.rows("shoot_participants")[0]
        assert participant["personnel_id"] is None
        assert participant["name"] == "Ana"


# =============================================================================
# AssociationService
# =============================================================================

class TestAssociations:
    def test_add_is_idempotent(self, fake_db, team_ctx, shoot):
        prop = fake_db.add("props", {"team_id": team_ctx.team_id, "name": "Staff"})

        first = AssociationService.add_association(shoot, AssociationKind.PROPS, prop["id"])
        second = AssociationService.add_association(shoot, AssociationKind.PROPS, prop["id"])

        assert first["id"] == second["id"]
        assert len(fake_db.rows("shoot_props")) == 1

    def test_add_foreign_resource_rejected(self, fake_db, team_ctx, shoot):
        other = fake_db.add("teams", {"name": "Other"})
        costume = fake_db.add("costumes", {"team_id": other["id"], "character_name": "Himmel"})

        with pytest.raises(ResourceNotFoundError):
            AssociationService.add_association(shoot, "costumes", costume["id"])

    def test_equipment_carries_link_quantity(self, fake_db, team_ctx, shoot):
        light = fake_db.add("equipment", {"team_id": team_ctx.team_id, "name": "AD200", "quantity": 5})

        AssociationService.add_association(shoot, AssociationKind.EQUIPMENT, light["id"], quantity=2)

        listed = AssociationService.list_associated(shoot, AssociationKind.EQUIPMENT)
        assert listed[0]["quantity"] == 2

    def test_remove_missing_link(self, fake_db, team_ctx, shoot):
        with pytest.raises(AssociationNotFoundError):
            AssociationService.remove_association(shoot, AssociationKind.PROPS, "missing")


class TestReplaceResources:
    def test_rebuilds_links_and_participants(self, fake_db, team_ctx, shoot):
        team_id = team_ctx.team_id
        old_prop = fake_db.add("props", {"team_id": team_id, "name": "Old"})
        new_prop = fake_db.add("props", {"team_id": team_id, "name": "New"})
        costume = fake_db.add("costumes", {"team_id": team_id, "character_name": "Frieren"})
        ana = fake_db.add("personnel", {"team_id": team_id, "name": "Ana", "email": "ana@example.com"})
        ben = fake_db.add("personnel", {"team_id": team_id, "name": "Ben"})
        fake_db.add("shoot_props", {"shoot_id": shoot["id"], "prop_id": old_prop["id"]})
        fake_db.add("shoot_participants", {"shoot_id": shoot["id"], "name": "Old guest", "role": "Helper"})

        payload = ResourcesReplace(
            propIds=[new_prop["id"], new_prop["id"]],
            costumeIds=[costume["id"]],
            personnelIds=[ana["id"], ben["id"]],
            participants=[{"name": "Ana B.", "role": "Photographer", "personnelId": ana["id"]}],
        )

        result = AssociationService.replace_resources(shoot, team_id, payload)

        assert result == {"success": True, "equipment": 0, "props": 1, "costumes": 1, "participants": 2}
        assert [r["prop_id"] for r in fake_db.rows("shoot_props")] == [new_prop["id"]]

        participants = {p["name"]: p for p in fake_db.rows("shoot_participants")}
        assert set(participants) == {"Ana B.", "Ben"}
        assert participants["Ana B."]["role"] == "Photographer"
        assert participants["Ben"]["role"] == "Participant"
        assert participants["Ben"]["personnel_id"] == ben["id"]

    def test_foreign_ids_are_skipped(self, fake_db, team_ctx, shoot):
        other = fake_db.add("teams", {"name": "Other"})
        foreign_prop = fake_db.add("props", {"team_id": other["id"], "name": "Theirs"})
        foreign_person = fake_db.add("personnel", {"team_id": other["id"], "name": "Eve"})

        payload = ResourcesReplace(
            propIds=[foreign_prop["id"]],
            participants=[{"name": "Guest", "role": "Model", "personnelId": foreign_person["id"]}],
        )

        result = AssociationService.replace_resources(shoot, team_ctx.team_id, payload)

        assert result["props"] == 0
        assert fake_db.rows("shoot_props") == []
        assert fake_db.rows("shoot_participants")[0]["personnel_id"] is None
