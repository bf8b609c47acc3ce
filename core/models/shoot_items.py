# =============================================================================
# core/models/shoot_items.py - Per-Shoot Child Schemas
# =============================================================================
# Rows that hang off a single shoot:
# - participants (who is attending, optionally linked to team personnel)
# - references (inspiration images and links)
# - associations (equipment / props / costumes pulled from team libraries)
# =============================================================================

from enum import Enum

from pydantic import Field

from .base import CamelModel


class AssociationKind(str, Enum):
    """Team libraries that can be linked to a shoot."""
    EQUIPMENT = "equipment"
    PROPS = "props"
    COSTUMES = "costumes"


# =============================================================================
# Participants
# =============================================================================

class ParticipantCreate(CamelModel):
    """
    Someone taking part in a shoot.

    personnel_id links the participant to a saved team personnel entry;
    ad-hoc participants leave it empty.
    """

    name: str = Field(..., min_length=1, max_length=200)
    role: str = Field(..., min_length=1, max_length=100)
    email: str | None = None
    personnel_id: str | None = None


class ParticipantUpdate(CamelModel):
    not_null_fields = frozenset({"name", "role"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    role: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = None
    personnel_id: str | None = None


# =============================================================================
# References
# =============================================================================

class ReferenceCreate(CamelModel):
    """
    An inspiration reference.

    Example:
        {"type": "image", "url": "https://.../pose.png", "title": "Pose"}
    """

    type: str = Field(..., min_length=1, max_length=50)
    url: str = Field(..., min_length=1)
    title: str | None = None
    notes: str | None = None


class ReferenceUpdate(CamelModel):
    not_null_fields = frozenset({"type", "url"})

    type: str | None = Field(default=None, min_length=1, max_length=50)
    url: str | None = Field(default=None, min_length=1)
    title: str | None = None
    notes: str | None = None


# =============================================================================
# Associations
# =============================================================================

class AssociationCreate(CamelModel):
    """Input for POST /api/shoots/{id}/{equipment,props,costumes}."""

    resource_id: str = Field(
        ...,
        min_length=1,
        description="Id of the team equipment/prop/costume to link"
    )

    quantity: int = Field(
        default=1,
        ge=1,
        description="Units needed (equipment only)"
    )


class ResourcesReplace(CamelModel):
    """
    Input for PATCH /api/shoots/{id}/resources.

    Replaces every association of the shoot in one call. Lists that are
    omitted are treated as empty.

    Example:
        {
            "equipmentIds": ["..."],
            "propIds": [],
            "costumeIds": ["..."],
            "personnelIds": ["..."],
            "participants": [{"name": "Ana", "role": "Photographer"}]
        }
    """

    equipment_ids: list[str] = Field(default_factory=list)
    prop_ids: list[str] = Field(default_factory=list)
    costume_ids: list[str] = Field(default_factory=list)
    personnel_ids: list[str] = Field(default_factory=list)
    participants: list[ParticipantCreate] = Field(default_factory=list)
