# =============================================================================
# core/services/team_service.py - Team & Membership Business Logic
# =============================================================================
# Owns everything about teams:
# - resolving the caller's active team (run on every team-scoped request)
# - role ranking and permission checks
# - team CRUD, membership listing, role changes and removals
#
# Active-team resolution:
#   1. profile.active_team_id, if the user is still a member of it
#   2. else the user's first membership (persisted as active)
#   3. else a new "<first_name>'s Team" / "My Team" owned by the user
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, utc_now_iso
from core.models.team import TeamContext, TeamRole, role_rank
from core.services.profile_service import ProfileService
from app.exceptions import (
    BadRequestError,
    InsufficientRoleError,
    MemberModificationError,
    MemberNotFoundError,
    NotTeamMemberError,
    TeamNotFoundError,
)

logger = logging.getLogger(__name__)

TEAMS_TABLE = "teams"
MEMBERS_TABLE = "team_members"


def default_team_name(profile: dict[str, Any] | None) -> str:
    """
    Name for the team auto-created on first use.

    Example:
        default_team_name({"first_name": "Ana"}) -> "Ana's Team"
        default_team_name(None) -> "My Team"
    """
    first_name = ((profile or {}).get("first_name") or "").strip()
    return f"{first_name}'s Team" if first_name else "My Team"


def can_modify_member(actor_role: TeamRole | str, target_role: TeamRole | str) -> bool:
    """
    Whether actor may change or remove a member holding target_role.

    Owners may modify anyone, admins only plain members, members nobody.
    """
    actor = TeamRole(actor_role)
    target = TeamRole(target_role)
    if actor == TeamRole.OWNER:
        return True
    if actor == TeamRole.ADMIN:
        return target == TeamRole.MEMBER
    return False


class TeamService:
    """
    Service for team and membership operations.

    Methods that act on "the current team" take a TeamContext, which the
    API layer builds once per request via resolve_active_team().
    """

    # -------------------------------------------------------------------------
    # Membership lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def get_membership(user_id: UUID | str, team_id: str) -> dict[str, Any] | None:
        """Get the user's team_members row for a team, if any."""
        return SupabaseClient.fetch_one(
            MEMBERS_TABLE,
            {"user_id": normalize_uuid(user_id), "team_id": team_id},
        )

    @staticmethod
    def list_memberships(user_id: UUID | str) -> list[dict[str, Any]]:
        """All of a user's memberships, oldest first."""
        return SupabaseClient.fetch_many(
            MEMBERS_TABLE,
            {"user_id": normalize_uuid(user_id)},
            order_by="created_at",
        )

    # -------------------------------------------------------------------------
    # Active team resolution
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_active_team(user_id: UUID | str) -> TeamContext:
        """
        Resolve which team the caller is acting in.

        Never fails for a signed-in user: a team is created when the user
        has none.

        Args:
            user_id: Auth user id

        Returns:
            TeamContext with the team id and the caller's role in it
        """
        user_id = normalize_uuid(user_id)
        profile = ProfileService.get_profile(user_id)

        # 1. Stored active team, if still a member
        active_team_id = (profile or {}).get("active_team_id")
        if active_team_id:
            membership = TeamService.get_membership(user_id, active_team_id)
            if membership:
                return TeamContext(
                    user_id=user_id,
                    team_id=str(active_team_id),
                    role=TeamRole(membership["role"]),
                )
            logger.info(f"User {user_id} is no longer in active team {active_team_id}")

        # 2. First existing membership
        memberships = TeamService.list_memberships(user_id)
        if memberships:
            first = memberships[0]
            ProfileService.set_active_team_id(user_id, str(first["team_id"]))
            return TeamContext(
                user_id=user_id,
                team_id=str(first["team_id"]),
                role=TeamRole(first["role"]),
            )

        # 3. Brand new user: give them a team of their own
        team = TeamService._create_team_with_owner(user_id, default_team_name(profile))
        ProfileService.set_active_team_id(user_id, str(team["id"]))
        logger.info(f"Created default team {team['id']} for user {user_id}")
        return TeamContext(user_id=user_id, team_id=str(team["id"]), role=TeamRole.OWNER)

    @staticmethod
    def set_active_team(user_id: UUID | str, team_id: str) -> str:
        """
        Switch the user's active team.

        Raises:
            NotTeamMemberError: If the user doesn't belong to the team
        """
        if not TeamService.get_membership(user_id, team_id):
            raise NotTeamMemberError(team_id)
        ProfileService.set_active_team_id(user_id, team_id)
        logger.info(f"User {user_id} switched active team to {team_id}")
        return team_id

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    @staticmethod
    def require_role(ctx: TeamContext, min_role: TeamRole) -> None:
        """
        Raises:
            InsufficientRoleError: If ctx.role ranks below min_role
        """
        if role_rank(ctx.role) < role_rank(min_role):
            raise InsufficientRoleError(TeamRole(min_role).value, TeamRole(ctx.role).value)

    # -------------------------------------------------------------------------
    # Teams
    # -------------------------------------------------------------------------

    @staticmethod
    def _create_team_with_owner(user_id: str, name: str) -> dict[str, Any]:
        team = SupabaseClient.insert_row(TEAMS_TABLE, {"name": name})
        SupabaseClient.insert_row(MEMBERS_TABLE, {
            "team_id": team["id"],
            "user_id": user_id,
            "role": TeamRole.OWNER.value,
        })
        return team

    @staticmethod
    def get_team(team_id: str) -> dict[str, Any]:
        """
        Raises:
            TeamNotFoundError: If the team doesn't exist
        """
        team = SupabaseClient.fetch_one(TEAMS_TABLE, {"id": team_id})
        if not team:
            raise TeamNotFoundError(team_id)
        return team

    @staticmethod
    def get_active_team(ctx: TeamContext) -> dict[str, Any]:
        """The context's team row plus the caller's role."""
        team = TeamService.get_team(ctx.team_id)
        return {**team, "role": TeamRole(ctx.role).value}

    @staticmethod
    def create_team(user_id: UUID | str, name: str) -> dict[str, Any]:
        """
        Create a team owned by the user and make it their active team.

        Raises:
            BadRequestError: If the trimmed name is empty
        """
        name = (name or "").strip()
        if not name:
            raise BadRequestError("Team name is required", code="INVALID_TEAM_NAME")

        user_id = normalize_uuid(user_id)
        team = TeamService._create_team_with_owner(user_id, name)
        ProfileService.set_active_team_id(user_id, str(team["id"]))

        logger.info(f"Created team {team['id']} ({name}) for user {user_id}")
        return {**team, "role": TeamRole.OWNER.value}

    @staticmethod
    def update_team(ctx: TeamContext, name: str) -> dict[str, Any]:
        """Rename the current team (admin or owner)."""
        TeamService.require_role(ctx, TeamRole.ADMIN)

        name = (name or "").strip()
        if not name:
            raise BadRequestError("Team name is required", code="INVALID_TEAM_NAME")

        rows = SupabaseClient.update_rows(
            TEAMS_TABLE,
            {"name": name, "updated_at": utc_now_iso()},
            {"id": ctx.team_id},
        )
        if not rows:
            raise TeamNotFoundError(ctx.team_id)
        return {**rows[0], "role": TeamRole(ctx.role).value}

    @staticmethod
    def delete_team(ctx: TeamContext) -> None:
        """
        Delete the current team (owner only).

        Team-scoped rows are removed by the database's ON DELETE CASCADE.
        Members whose active team was this one fall back to another team on
        their next request.
        """
        TeamService.require_role(ctx, TeamRole.OWNER)

        SupabaseClient.delete_rows(MEMBERS_TABLE, {"team_id": ctx.team_id})
        deleted = SupabaseClient.delete_rows(TEAMS_TABLE, {"id": ctx.team_id})
        if not deleted:
            raise TeamNotFoundError(ctx.team_id)

        ProfileService.set_active_team_id(ctx.user_id, None)
        logger.info(f"Deleted team {ctx.team_id}")

    @staticmethod
    def list_user_teams(user_id: UUID | str) -> list[dict[str, Any]]:
        """
        Every team the user belongs to.

        Returns:
            [{id, name, role, created_at, is_active}], oldest membership first
        """
        memberships = TeamService.list_memberships(user_id)
        if not memberships:
            return []

        teams = SupabaseClient.fetch_many(
            TEAMS_TABLE,
            in_filter=("id", [m["team_id"] for m in memberships]),
        )
        teams_by_id = {str(t["id"]): t for t in teams}

        profile = ProfileService.get_profile(user_id) or {}
        active_team_id = str(profile.get("active_team_id") or "")

        result = []
        for membership in memberships:
            team = teams_by_id.get(str(membership["team_id"]))
            if not team:
                continue
            result.append({
                "id": team["id"],
                "name": team["name"],
                "role": membership["role"],
                "created_at": team.get("created_at"),
                "is_active": str(team["id"]) == active_team_id,
            })
        return result

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    @staticmethod
    def list_members(ctx: TeamContext) -> list[dict[str, Any]]:
        """
        Members of the current team with their profile display data.

        Returns:
            team_members rows extended with email, first_name, last_name
            and avatar_url
        """
        members = SupabaseClient.fetch_many(
            MEMBERS_TABLE,
            {"team_id": ctx.team_id},
            order_by="created_at",
        )
        profiles = SupabaseClient.fetch_many(
            "user_profiles",
            in_filter=("user_id", [m["user_id"] for m in members]),
        )
        profiles_by_user = {str(p["user_id"]): p for p in profiles}

        result = []
        for member in members:
            profile = profiles_by_user.get(str(member["user_id"]), {})
            result.append({
                **member,
                "email": profile.get("email"),
                "first_name": profile.get("first_name"),
                "last_name": profile.get("last_name"),
                "avatar_url": profile.get("avatar_url"),
            })
        return result

    @staticmethod
    def _get_member(ctx: TeamContext, member_id: str) -> dict[str, Any]:
        member = SupabaseClient.fetch_one(MEMBERS_TABLE, {"id": member_id, "team_id": ctx.team_id})
        if not member:
            raise MemberNotFoundError(member_id)
        return member

    @staticmethod
    def _owner_count(team_id: str) -> int:
        owners = SupabaseClient.fetch_many(
            MEMBERS_TABLE,
            {"team_id": team_id, "role": TeamRole.OWNER.value},
            columns="id",
        )
        return len(owners)

    @staticmethod
    def update_member_role(ctx: TeamContext, member_id: str, new_role: TeamRole) -> dict[str, Any]:
        """
        Change a member's role.

        Raises:
            InsufficientRoleError: Caller is a plain member
            MemberNotFoundError: member_id isn't in the current team
            MemberModificationError: Target outranks what the caller may
                modify, the new role is above the caller's, or the change
                would leave the team without an owner
        """
        TeamService.require_role(ctx, TeamRole.ADMIN)
        new_role = TeamRole(new_role)
        target = TeamService._get_member(ctx, member_id)
        target_role = TeamRole(target["role"])

        if not can_modify_member(ctx.role, target_role):
            raise MemberModificationError(f"You cannot change the role of a team {target_role.value}")

        if role_rank(new_role) > role_rank(ctx.role):
            raise MemberModificationError(f"You cannot grant the {new_role.value} role")

        if target_role == TeamRole.OWNER and new_role != TeamRole.OWNER:
            if TeamService._owner_count(ctx.team_id) <= 1:
                raise MemberModificationError("A team must keep at least one owner")

        if new_role == target_role:
            return target

        rows = SupabaseClient.update_rows(
            MEMBERS_TABLE,
            {"role": new_role.value},
            {"id": member_id, "team_id": ctx.team_id},
        )
        logger.info(f"Member {member_id} role {target_role.value} -> {new_role.value} in team {ctx.team_id}")
        return rows[0] if rows else {**target, "role": new_role.value}

    @staticmethod
    def remove_member(ctx: TeamContext, member_id: str) -> None:
        """
        Remove a member from the current team.

        Anyone may remove themselves; removing others follows
        can_modify_member. The last owner can never be removed.
        """
        target = TeamService._get_member(ctx, member_id)
        target_role = TeamRole(target["role"])
        is_self = str(target["user_id"]) == str(ctx.user_id)

        if not is_self and not can_modify_member(ctx.role, target_role):
            raise MemberModificationError(f"You cannot remove a team {target_role.value}")

        if target_role == TeamRole.OWNER and TeamService._owner_count(ctx.team_id) <= 1:
            raise MemberModificationError("A team must keep at least one owner")

        SupabaseClient.delete_rows(MEMBERS_TABLE, {"id": member_id, "team_id": ctx.team_id})
        logger.info(f"Removed member {member_id} from team {ctx.team_id}")
