# =============================================================================
# core/models/resource.py - Team Resource Schemas
# =============================================================================
# A team keeps five reusable resource libraries that shoots draw from:
# personnel, equipment, locations, props and costumes.
#
# Each kind has a Create schema (required fields enforced) and an Update
# schema (every field optional, only sent fields are written). The
# RESOURCE_KINDS registry maps the URL segment to its table and schemas so
# one generic service and one router factory handle all five.
# =============================================================================

from dataclasses import dataclass
from enum import Enum

from pydantic import Field

from .base import CamelModel


class ResourceKind(str, Enum):
    """URL segment and registry key for each resource library."""
    PERSONNEL = "personnel"
    EQUIPMENT = "equipment"
    LOCATIONS = "locations"
    PROPS = "props"
    COSTUMES = "costumes"


class CostumeStatus(str, Enum):
    """Build progress of a costume."""
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# =============================================================================
# Personnel
# =============================================================================

class PersonnelCreate(CamelModel):
    """A photographer, cosplayer, assistant, ... the team works with."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    avatar_url: str | None = None


class PersonnelUpdate(CamelModel):
    not_null_fields = frozenset({"name"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    avatar_url: str | None = None


# =============================================================================
# Equipment
# =============================================================================

class EquipmentCreate(CamelModel):
    """
    A piece of gear (camera body, lens, light, backdrop).

    Example:
        {"name": "Godox AD200", "category": "Lighting", "quantity": 2}
    """

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    quantity: int = Field(default=1, ge=1)
    available: bool = True
    image_url: str | None = None


class EquipmentUpdate(CamelModel):
    not_null_fields = frozenset({"name", "category", "quantity", "available"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    quantity: int | None = Field(default=None, ge=1)
    available: bool | None = None
    image_url: str | None = None


# =============================================================================
# Locations
# =============================================================================

class LocationCreate(CamelModel):
    """
    A saved shooting location.

    place_id and coordinates come from the geocoding endpoints when the
    user picks a suggestion.
    """

    name: str = Field(..., min_length=1, max_length=200)
    address: str | None = None
    place_id: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    notes: str | None = None
    image_url: str | None = None


class LocationUpdate(CamelModel):
    not_null_fields = frozenset({"name"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = None
    place_id: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    notes: str | None = None
    image_url: str | None = None


# =============================================================================
# Props
# =============================================================================

class PropCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    available: bool = True
    image_url: str | None = None


class PropUpdate(CamelModel):
    not_null_fields = frozenset({"name", "available"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    available: bool | None = None
    image_url: str | None = None


# =============================================================================
# Costumes
# =============================================================================

class CostumeCreate(CamelModel):
    """
    A costume, identified by the character it portrays.

    Example:
        {"characterName": "Frieren", "seriesName": "Sousou no Frieren"}
    """

    character_name: str = Field(..., min_length=1, max_length=200)
    series_name: str | None = None
    status: CostumeStatus = CostumeStatus.PLANNING
    notes: str | None = None
    image_url: str | None = None


class CostumeUpdate(CamelModel):
    not_null_fields = frozenset({"character_name", "status"})

    character_name: str | None = Field(default=None, min_length=1, max_length=200)
    series_name: str | None = None
    status: CostumeStatus | None = None
    notes: str | None = None
    image_url: str | None = None


# =============================================================================
# Registry
# =============================================================================

@dataclass(frozen=True)
class ResourceSpec:
    """How one resource kind is stored and validated."""
    kind: ResourceKind
    table: str
    label: str
    create_model: type[CamelModel]
    update_model: type[CamelModel]
    order_by: str = "created_at"


RESOURCE_KINDS: dict[ResourceKind, ResourceSpec] = {
    ResourceKind.PERSONNEL: ResourceSpec(
        ResourceKind.PERSONNEL, "personnel", "personnel",
        PersonnelCreate, PersonnelUpdate, order_by="name",
    ),
    ResourceKind.EQUIPMENT: ResourceSpec(
        ResourceKind.EQUIPMENT, "equipment", "equipment",
        EquipmentCreate, EquipmentUpdate, order_by="name",
    ),
    ResourceKind.LOCATIONS: ResourceSpec(
        ResourceKind.LOCATIONS, "locations", "location",
        LocationCreate, LocationUpdate, order_by="name",
    ),
    ResourceKind.PROPS: ResourceSpec(
        ResourceKind.PROPS, "props", "prop",
        PropCreate, PropUpdate, order_by="name",
    ),
    ResourceKind.COSTUMES: ResourceSpec(
        ResourceKind.COSTUMES, "costumes", "costume",
        CostumeCreate, CostumeUpdate, order_by="character_name",
    ),
}


def get_resource_spec(kind: ResourceKind | str) -> ResourceSpec:
    """Look up a registry entry by enum or URL segment."""
    return RESOURCE_KINDS[ResourceKind(kind)]
