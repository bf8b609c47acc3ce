# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================
# Integration services (calendar, docs, email, geocoding) are imported from
# their modules directly so the Google client libraries load only when used.
# =============================================================================

from .profile_service import ProfileService
from .team_service import TeamService, can_modify_member, default_team_name
from .resource_service import ResourceService
from .shoot_items_service import ParticipantService, ReferenceService
from .association_service import AssociationService
from .shoot_service import ShootService
from .storage_service import StorageService

__all__ = [
    "ProfileService",
    "TeamService",
    "can_modify_member",
    "default_team_name",
    "ResourceService",
    "ParticipantService",
    "ReferenceService",
    "AssociationService",
    "ShootService",
    "StorageService",
]
