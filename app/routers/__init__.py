# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - shoots.py: Shoot CRUD and aggregated details
# - shoot_items.py: Participants, references and linked resources
# - integrations.py: Calendar, Docs and reminder email endpoints
# - resources.py: Team resource libraries (router factory)
# - team.py: Active team and membership management
# - user.py: Profile, team list, active team switch
# - places.py: Google Places and Mapbox geocoding
# - files.py: Image uploads
# - tasks.py: Background task status
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import shoots
from . import shoot_items
from . import integrations
from . import resources
from . import team
from . import user
from . import places
from . import files
from . import tasks

__all__ = [
    "health",
    "shoots",
    "shoot_items",
    "integrations",
    "resources",
    "team",
    "user",
    "places",
    "files",
    "tasks",
]
