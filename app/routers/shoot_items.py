# =============================================================================
# app/routers/shoot_items.py - Per-Shoot Sub-Resource Endpoints
# =============================================================================
# Mounted under /api/shoots:
# - /{shoot_id}/participants[/{participant_id}]
# - /{shoot_id}/references[/{reference_id}]
# - /{shoot_id}/{equipment,props,costumes}[/{resource_id}]
# - /{shoot_id}/resources (replace every link in one call)
#
# Each handler first loads the shoot through the active team, so a shoot
# from another team is 404 before any child row is touched.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from app.dependencies import TeamDep
from core.models.shoot_items import (
    AssociationCreate,
    AssociationKind,
    ParticipantCreate,
    ParticipantUpdate,
    ReferenceCreate,
    ReferenceUpdate,
    ResourcesReplace,
)
from core.services.association_service import AssociationService
from core.services.shoot_items_service import ParticipantService, ReferenceService
from core.services.shoot_service import ShootService
from lib.casing import camel_keys

router = APIRouter()

ShootId = Annotated[UUID, Path(description="Shoot UUID")]
ParticipantId = Annotated[UUID, Path(description="Participant UUID")]
ReferenceId = Annotated[UUID, Path(description="Reference UUID")]
ResourceId = Annotated[UUID, Path(description="Equipment/prop/costume UUID")]
Kind = Annotated[AssociationKind, Path(description="equipment, props or costumes")]


# =============================================================================
# Resources (bulk replace)
# =============================================================================

@router.patch("/{shoot_id}/resources")
async def replace_shoot_resources(shoot_id: ShootId, body: ResourcesReplace, ctx: TeamDep):
    """
    Replace all equipment, props, costumes and participants of a shoot.

    Personnel ids without a matching participant entry are added as
    participants with role "Participant".
    """
    shoot = ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return AssociationService.replace_resources(shoot, ctx.team_id, body)


# =============================================================================
# Participants
# =============================================================================

@router.get("/{shoot_id}/participants")
async def list_participants(shoot_id: ShootId, ctx: TeamDep):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ParticipantService.list(str(shoot_id)))


@router.post("/{shoot_id}/participants", status_code=status.HTTP_201_CREATED)
async def create_participant(shoot_id: ShootId, body: ParticipantCreate, ctx: TeamDep):
    """Add a participant (optionally linked to team personnel)."""
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ParticipantService.create(str(shoot_id), ctx.team_id, body))


@router.get("/{shoot_id}/participants/{participant_id}")
async def get_participant(shoot_id: ShootId, participant_id: ParticipantId, ctx: TeamDep):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ParticipantService.get(str(shoot_id), str(participant_id)))


@router.patch("/{shoot_id}/participants/{participant_id}")
async def update_participant(
    shoot_id: ShootId,
    participant_id: ParticipantId,
    body: ParticipantUpdate,
    ctx: TeamDep,
):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ParticipantService.update(str(shoot_id), ctx.team_id, str(participant_id), body))


@router.delete("/{shoot_id}/participants/{participant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_participant(shoot_id: ShootId, participant_id: ParticipantId, ctx: TeamDep):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    ParticipantService.delete(str(shoot_id), str(participant_id))


# =============================================================================
# References
# =============================================================================

@router.get("/{shoot_id}/references")
async def list_references(shoot_id: ShootId, ctx: TeamDep):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ReferenceService.list(str(shoot_id)))


@router.post("/{shoot_id}/references", status_code=status.HTTP_201_CREATED)
async def create_reference(shoot_id: ShootId, body: ReferenceCreate, ctx: TeamDep):
    """Attach an inspiration image or link."""
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ReferenceService.create(str(shoot_id), body))


@router.patch("/{shoot_id}/references/{reference_id}")
async def update_reference(
    shoot_id: ShootId,
    reference_id: ReferenceId,
    body: ReferenceUpdate,
    ctx: TeamDep,
):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(ReferenceService.update(str(shoot_id), str(reference_id), body))


@router.delete("/{shoot_id}/references/{reference_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reference(shoot_id: ShootId, reference_id: ReferenceId, ctx: TeamDep):
    ShootService.get_shoot(str(shoot_id), ctx.team_id)
    ReferenceService.delete(str(shoot_id), str(reference_id))


# =============================================================================
# Linked equipment / props / costumes
# =============================================================================

@router.get("/{shoot_id}/{kind}")
async def list_linked_resources(shoot_id: ShootId, kind: Kind, ctx: TeamDep):
    """
    Team resources linked to the shoot. Equipment includes the per-shoot
    quantity.
    """
    shoot = ShootService.get_shoot(str(shoot_id), ctx.team_id)
    return camel_keys(AssociationService.list_associated(shoot, kind))


@router.post("/{shoot_id}/{kind}", status_code=status.HTTP_201_CREATED)
async def link_resource(shoot_id: ShootId, kind: Kind, body: AssociationCreate, ctx: TeamDep):
    """
    Link a team resource to the shoot. Linking twice returns the existing
    link.
    """
    shoot = ShootService.get_shoot(str(shoot_id), ctx.team_id)
    link = AssociationService.add_association(shoot, kind, body.resource_id, quantity=body.quantity)
    return camel_keys(link)


@router.delete("/{shoot_id}/{kind}/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unlink_resource(shoot_id: ShootId, kind: Kind, resource_id: ResourceId, ctx: TeamDep):
    shoot = ShootService.get_shoot(str(shoot_id), ctx.team_id)
    AssociationService.remove_association(shoot, kind, str(resource_id))
