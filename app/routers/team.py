# =============================================================================
# app/routers/team.py - Active Team & Membership Endpoints
# =============================================================================
# All endpoints act on the caller's active team:
#   GET    /api/team                      active team (with caller's role)
#   POST   /api/team                      create a team (becomes active)
#   PATCH  /api/team                      rename (admin+)
#   DELETE /api/team                      delete (owner)
#   GET    /api/team/members              members with profile data
#   PATCH  /api/team/members/{member_id}  change role
#   DELETE /api/team/members/{member_id}  remove member
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from app.dependencies import CurrentUser, TeamDep
from core.models.team import MemberRoleUpdate, TeamCreate, TeamUpdate
from core.services.team_service import TeamService
from lib.casing import camel_keys

router = APIRouter()

MemberId = Annotated[UUID, Path(description="team_members row UUID")]


@router.get("")
async def get_active_team(ctx: TeamDep):
    """The active team, created on first use if the caller has none."""
    return camel_keys(TeamService.get_active_team(ctx))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_team(body: TeamCreate, user: CurrentUser):
    """Create a team owned by the caller and switch to it."""
    return camel_keys(TeamService.create_team(user.id, body.name))


@router.patch("")
async def update_team(body: TeamUpdate, ctx: TeamDep):
    """Rename the active team. Requires admin or owner."""
    return camel_keys(TeamService.update_team(ctx, body.name))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(ctx: TeamDep):
    """Delete the active team. Owner only."""
    TeamService.delete_team(ctx)


@router.get("/members")
async def list_members(ctx: TeamDep):
    return camel_keys(TeamService.list_members(ctx))


@router.patch("/members/{member_id}")
async def update_member_role(member_id: MemberId, body: MemberRoleUpdate, ctx: TeamDep):
    """
    Change a member's role.

    Admins may only change plain members; owners may change anyone. The
    last owner can't be demoted.
    """
    return camel_keys(TeamService.update_member_role(ctx, str(member_id), body.role))


@router.delete("/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(member_id: MemberId, ctx: TeamDep):
    """Remove a member (or leave the team when it's your own membership)."""
    TeamService.remove_member(ctx, str(member_id))
