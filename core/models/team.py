# =============================================================================
# core/models/team.py - Team & Membership Schemas
# =============================================================================
# Every shoot and resource belongs to a team. A user can be a member of
# several teams and has one "active" team at a time, stored on their
# profile. Roles are ranked member < admin < owner.
# =============================================================================

from dataclasses import dataclass
from enum import Enum

from pydantic import Field

from .base import CamelModel


class TeamRole(str, Enum):
    """
    Membership role within a team.

    - owner: full control, including deleting the team
    - admin: manage team settings and members (but not owners)
    - member: read and edit shoots and resources
    """
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


ROLE_RANK: dict[TeamRole, int] = {
    TeamRole.MEMBER: 1,
    TeamRole.ADMIN: 2,
    TeamRole.OWNER: 3,
}


def role_rank(role: TeamRole | str | None) -> int:
    """Numeric rank of a role; unknown roles rank 0."""
    try:
        return ROLE_RANK[TeamRole(role)]
    except ValueError:
        return 0


@dataclass(frozen=True)
class TeamContext:
    """
    The caller's resolved membership for a request.

    Produced once per request by the team dependency and passed to
    services that need team scoping or role checks.
    """
    user_id: str
    team_id: str
    role: TeamRole


class TeamCreate(CamelModel):
    """Input for POST /api/team."""

    name: str = Field(..., min_length=1, max_length=100)


class TeamUpdate(CamelModel):
    """Input for PATCH /api/team."""

    name: str = Field(..., min_length=1, max_length=100)


class MemberRoleUpdate(CamelModel):
    """Input for PATCH /api/team/members/{memberId}."""

    role: TeamRole


class SetActiveTeamRequest(CamelModel):
    """Input for POST /api/user/active-team."""

    team_id: str = Field(..., min_length=1)
