# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: CamelModel (accepts camelCase or snake_case input)
# - shoot.py: Shoot create/update schemas and status normalization
# - resource.py: Team resource libraries and the RESOURCE_KINDS registry
# - shoot_items.py: Participants, references and resource links
# - team.py: Teams, roles and the per-request TeamContext
# - profile.py: User profile updates
# - task.py: Background task status
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import CamelModel

from .shoot import (
    CalendarEventRequest,
    ShootCreate,
    ShootStatus,
    ShootUpdate,
    normalize_status,
    parse_instagram_links,
)

from .resource import (
    RESOURCE_KINDS,
    CostumeCreate,
    CostumeStatus,
    CostumeUpdate,
    EquipmentCreate,
    EquipmentUpdate,
    LocationCreate,
    LocationUpdate,
    PersonnelCreate,
    PersonnelUpdate,
    PropCreate,
    PropUpdate,
    ResourceKind,
    ResourceSpec,
    get_resource_spec,
)

from .shoot_items import (
    AssociationCreate,
    AssociationKind,
    ParticipantCreate,
    ParticipantUpdate,
    ReferenceCreate,
    ReferenceUpdate,
    ResourcesReplace,
)

from .team import (
    ROLE_RANK,
    MemberRoleUpdate,
    SetActiveTeamRequest,
    TeamContext,
    TeamCreate,
    TeamRole,
    TeamUpdate,
    role_rank,
)

from .profile import ProfileUpdate
from .task import TaskState, TaskStatus

__all__ = [
    "CamelModel",
    # Shoots
    "CalendarEventRequest",
    "ShootCreate",
    "ShootStatus",
    "ShootUpdate",
    "normalize_status",
    "parse_instagram_links",
    # Resources
    "RESOURCE_KINDS",
    "CostumeCreate",
    "CostumeStatus",
    "CostumeUpdate",
    "EquipmentCreate",
    "EquipmentUpdate",
    "LocationCreate",
    "LocationUpdate",
    "PersonnelCreate",
    "PersonnelUpdate",
    "PropCreate",
    "PropUpdate",
    "ResourceKind",
    "ResourceSpec",
    "get_resource_spec",
    # Shoot items
    "AssociationCreate",
    "AssociationKind",
    "ParticipantCreate",
    "ParticipantUpdate",
    "ReferenceCreate",
    "ReferenceUpdate",
    "ResourcesReplace",
    # Teams
    "ROLE_RANK",
    "MemberRoleUpdate",
    "SetActiveTeamRequest",
    "TeamContext",
    "TeamCreate",
    "TeamRole",
    "TeamUpdate",
    "role_rank",
    # Profile / tasks
    "ProfileUpdate",
    "TaskState",
    "TaskStatus",
]
