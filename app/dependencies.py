# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Every team-scoped route takes TeamDep: it authenticates the caller and
# resolves their active team once per request.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from core.models.team import TeamContext
from core.services.team_service import TeamService


async def get_team_context(
    user: AuthUser = Depends(get_current_user),
) -> TeamContext:
    """
    Resolve the caller's active team.

    Returns:
        TeamContext(user_id, team_id, role)
    """
    return TeamService.resolve_active_team(user.id)


# Type aliases for dependency injection
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
TeamDep = Annotated[TeamContext, Depends(get_team_context)]
