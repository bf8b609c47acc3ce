# =============================================================================
# app/routers/shoots.py - Shoot CRUD Endpoints
# =============================================================================
# Handles shoot creation and management for the caller's active team.
# All endpoints require authentication.
#
# Sub-resources (participants, references, linked equipment/props/costumes)
# live in shoot_items.py; calendar/docs/reminders in integrations.py.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from app.dependencies import TeamDep
from core.models.shoot import ShootCreate, ShootUpdate
from core.services.shoot_service import ShootService
from lib.casing import camel_keys

router = APIRouter()

ShootId = Annotated[UUID, Path(description="Shoot UUID")]


@router.get("")
async def list_shoots(
    ctx: TeamDep,
    status_filter: Annotated[
        str | None,
        Query(alias="status", description="Filter by status (e.g. planning, ready-to-shoot)")
    ] = None,
):
    """
    List the active team's shoots, newest first.
    """
    return camel_keys(ShootService.list_shoots(ctx.team_id, status=status_filter))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_shoot(body: ShootCreate, ctx: TeamDep):
    """
    Create a shoot in the active team.

    Accepts camelCase or snake_case keys. Status defaults to "idea".
    """
    shoot = ShootService.create_shoot(ctx.team_id, ctx.user_id, body)
    return camel_keys(shoot)


@router.get("/{shoot_id}")
async def get_shoot(shoot_id: ShootId, ctx: TeamDep):
    """
    Get one shoot. 404 if it doesn't exist or belongs to another team.
    """
    return camel_keys(ShootService.get_shoot(str(shoot_id), ctx.team_id))


@router.get("/{shoot_id}/details")
async def get_shoot_details(shoot_id: ShootId, ctx: TeamDep):
    """
    Shoot with its location, participants, references, equipment,
    props and costumes in one response.
    """
    return camel_keys(ShootService.get_shoot_details(str(shoot_id), ctx.team_id))


@router.patch("/{shoot_id}")
async def update_shoot(shoot_id: ShootId, body: ShootUpdate, ctx: TeamDep):
    """
    Partially update a shoot. Only fields present in the body are written.
    """
    return camel_keys(ShootService.update_shoot(str(shoot_id), ctx.team_id, body))


@router.delete("/{shoot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shoot(shoot_id: ShootId, ctx: TeamDep):
    """
    Delete a shoot together with its participants, references and links.
    """
    ShootService.delete_shoot(str(shoot_id), ctx.team_id)
