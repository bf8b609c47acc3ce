# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the request models to ensure:
# - camelCase and snake_case input both populate fields
# - Status and instagram link normalization
# - Invalid data raises ValidationError
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    CostumeCreate,
    CostumeStatus,
    ResourceKind,
    ResourcesReplace,
    ShootCreate,
    ShootStatus,
    ShootUpdate,
    TeamRole,
    get_resource_spec,
    role_rank,
)
from core.models.shoot import normalize_status, parse_instagram_links


# =============================================================================
# Shoot Model Tests
# =============================================================================

class TestShootStatus:
    """Tests for status normalization."""

    @pytest.mark.parametrize("raw", ["ready to shoot", "Ready-To-Shoot", "READY_TO_SHOOT", "scheduled"])
    def test_ready_spellings(self, raw):
        assert normalize_status(raw) == "ready to shoot"

    def test_create_accepts_loose_status(self):
        shoot = ShootCreate(title="Frieren", status="Ready_to_shoot")
        assert shoot.status == ShootStatus.READY

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            ShootCreate(title="Frieren", status="someday")

    def test_default_status_is_idea(self):
        assert ShootCreate(title="Frieren").status == ShootStatus.IDEA


class TestInstagramLinks:
    """Tests for instagram_links coercion."""

    def test_json_string_decoded(self):
        assert parse_instagram_links('["https://instagram.com/p/a", " "]') == ["https://instagram.com/p/a"]

    def test_garbage_becomes_empty(self):
        assert parse_instagram_links("not json") == []
        assert parse_instagram_links('{"a": 1}') == []
        assert parse_instagram_links(None) == []

    def test_model_uses_coercion(self):
        shoot = ShootCreate(title="x", instagramLinks='["https://instagram.com/p/b"]')
        assert shoot.instagram_links == ["https://instagram.com/p/b"]


class TestShootCreate:
    """Tests for ShootCreate."""

    def test_camel_and_snake_input(self):
        a = ShootCreate(title="x", durationMinutes=90, locationId="loc-1")
        b = ShootCreate(title="x", duration_minutes=90, location_id="loc-1")
        assert a.model_dump() == b.model_dump()

    def test_title_stripped_and_required(self):
        assert ShootCreate(title="  Autumn  ").title == "Autumn"
        with pytest.raises(ValidationError):
            ShootCreate(title="   ")

    def test_duration_must_be_positive(self):
        with pytest.raises(ValidationError):
            ShootCreate(title="x", durationMinutes=0)

    def test_dump_is_snake_case(self):
        row = ShootCreate(title="x", instagramLinks=[]).model_dump(mode="json")
        assert "instagram_links" in row
        assert row["status"] == "idea"


class TestShootUpdate:
    """Tests for ShootUpdate partial semantics."""

    def test_only_sent_fields_dumped(self):
        update = ShootUpdate(status="completed")
        assert update.model_dump(mode="json", exclude_unset=True) == {"status": "completed"}

    def test_unknown_fields_ignored(self):
        update = ShootUpdate(title="y", teamId="other-team")
        assert update.model_dump(exclude_unset=True) == {"title": "y"}

    @pytest.mark.parametrize("field", ["title", "status"])
    def test_required_columns_not_nullable(self, field):
        with pytest.raises(ValidationError):
            ShootUpdate(**{field: None})

    def test_optional_columns_clearable(self):
        update = ShootUpdate(date=None, notes=None, locationId=None)
        assert update.model_dump(exclude_unset=True) == {"date": None, "notes": None, "location_id": None}


# =============================================================================
# Resource Model Tests
# =============================================================================

class TestResourceModels:
    """Tests for the resource registry and schemas."""

    def test_registry_tables(self):
        assert get_resource_spec("locations").table == "locations"
        assert get_resource_spec(ResourceKind.COSTUMES).order_by == "character_name"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            get_resource_spec("vehicles")

    def test_costume_defaults(self):
        costume = CostumeCreate(characterName="Frieren")
        assert costume.status == CostumeStatus.PLANNING
        assert costume.character_name == "Frieren"

    @pytest.mark.parametrize("kind,body", [
        (ResourceKind.EQUIPMENT, {"name": None}),
        (ResourceKind.EQUIPMENT, {"quantity": None}),
        (ResourceKind.EQUIPMENT, {"available": None}),
        (ResourceKind.PROPS, {"available": None}),
        (ResourceKind.COSTUMES, {"characterName": None}),
        (ResourceKind.PERSONNEL, {"name": None}),
        (ResourceKind.LOCATIONS, {"name": None}),
    ])
    def test_update_rejects_null_required_columns(self, kind, body):
        with pytest.raises(ValidationError):
            get_resource_spec(kind).update_model(**body)

    def test_update_allows_null_optional_columns(self):
        update = get_resource_spec(ResourceKind.EQUIPMENT).update_model(description=None, imageUrl=None)
        assert update.model_dump(exclude_unset=True) == {"description": None, "image_url": None}

    def test_costume_status_values(self):
        assert CostumeCreate(characterName="x", status="in-progress").status == CostumeStatus.IN_PROGRESS
        with pytest.raises(ValidationError):
            CostumeCreate(characterName="x", status="idea")


class TestResourcesReplace:
    def test_defaults_empty(self):
        payload = ResourcesReplace()
        assert payload.equipment_ids == []
        assert payload.participants == []

    def test_camel_case_payload(self):
        payload = ResourcesReplace(
            equipmentIds=["e1"],
            participants=[{"name": "Ana", "role": "Model", "personnelId": "p1"}],
        )
        assert payload.equipment_ids == ["e1"]
        assert payload.participants[0].personnel_id == "p1"


# =============================================================================
# Team Model Tests
# =============================================================================

class TestRoles:
    def test_rank_order(self):
        assert role_rank(TeamRole.OWNER) > role_rank(TeamRole.ADMIN) > role_rank(TeamRole.MEMBER)

    def test_string_and_unknown(self):
        assert role_rank("admin") == role_rank(TeamRole.ADMIN)
        assert role_rank("guest") == 0
        assert role_rank(None) == 0
