# =============================================================================
# app/routers/user.py - Current User Endpoints
# =============================================================================
# Profile and team membership of the signed-in user.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import CurrentUser
from core.models.profile import ProfileUpdate
from core.models.team import SetActiveTeamRequest
from core.services.profile_service import ProfileService
from core.services.team_service import TeamService
from lib.casing import camel_keys

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile")
async def get_profile(user: CurrentUser):
    """
    The caller's profile. Created from the auth token on first access.
    """
    profile = ProfileService.ensure_profile(user.id, user.email, user.metadata)
    return camel_keys(profile)


@router.patch("/profile")
async def update_profile(body: ProfileUpdate, user: CurrentUser):
    """Update first name, last name or avatar."""
    ProfileService.ensure_profile(user.id, user.email, user.metadata)
    return camel_keys(ProfileService.update_profile(user.id, body))


@router.get("/teams")
async def list_teams(user: CurrentUser):
    """Every team the caller belongs to, with role and active flag."""
    return camel_keys(TeamService.list_user_teams(user.id))


@router.post("/active-team")
async def set_active_team(body: SetActiveTeamRequest, user: CurrentUser):
    """
    Switch the active team.

    Raises:
        403: Caller is not a member of the team
    """
    team_id = TeamService.set_active_team(user.id, body.team_id)
    return {
        "success": True,
        "activeTeamId": team_id,
        "message": "Active team updated",
    }
