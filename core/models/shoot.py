# =============================================================================
# core/models/shoot.py - Shoot Schemas
# =============================================================================
# These models define the API contract for shoot operations:
# - ShootStatus: Kanban lifecycle (idea -> planning -> ready to shoot -> completed)
# - ShootCreate: Input for POST /api/shoots
# - ShootUpdate: Partial input for PATCH /api/shoots/{id}
#
# A shoot is one planned photography session, scoped to a team.
# =============================================================================

import json
import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from .base import CamelModel


class ShootStatus(str, Enum):
    """
    Kanban column a shoot sits in.

    Flow: idea -> planning -> ready to shoot -> completed
    """
    IDEA = "idea"
    PLANNING = "planning"
    READY = "ready to shoot"
    COMPLETED = "completed"


# Values older clients still send
_LEGACY_STATUSES = {
    "scheduled": ShootStatus.READY.value,
}

_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_status(value: Any) -> Any:
    """
    Normalize user-supplied status text.

    Case-insensitive; "-" and "_" count as spaces.

    Example:
        normalize_status("Ready-To-Shoot") -> "ready to shoot"
        normalize_status("scheduled") -> "ready to shoot"
    """
    if not isinstance(value, str):
        return value
    text = _SEPARATORS.sub(" ", value).strip().lower()
    return _LEGACY_STATUSES.get(text, text)


def parse_instagram_links(value: Any) -> list[str]:
    """
    Coerce instagram_links input to a list of strings.

    Form posts send the list JSON-encoded; anything undecodable is treated
    as no links.
    """
    if value is None:
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return []
    if not isinstance(value, list):
        return []
    return [str(link).strip() for link in value if link is not None and str(link).strip()]


class _ShootFields(CamelModel):
    """Validators shared by create and update."""

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        return normalize_status(value)

    @field_validator("instagram_links", mode="before", check_fields=False)
    @classmethod
    def _parse_links(cls, value: Any) -> list[str]:
        return parse_instagram_links(value)


class ShootCreate(_ShootFields):
    """
    Schema for creating a shoot.

    team_id and user_id are never accepted from the body; they come from
    the authenticated caller.

    Example:
        {
            "title": "Frieren autumn shoot",
            "status": "planning",
            "date": "2025-10-04T15:00:00Z",
            "durationMinutes": 180,
            "instagramLinks": ["https://instagram.com/p/abc"]
        }
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Shoot title"
    )

    status: ShootStatus = Field(
        default=ShootStatus.IDEA,
        description="Kanban status"
    )

    date: datetime | None = Field(
        default=None,
        description="Planned start time"
    )

    duration_minutes: int | None = Field(
        default=None,
        gt=0,
        description="Planned length in minutes"
    )

    location_id: str | None = Field(
        default=None,
        description="Linked team location"
    )

    # Free text, for places not saved as a team location
    location: str | None = None
    description: str | None = None
    notes: str | None = None

    instagram_links: list[str] = Field(
        default_factory=list,
        description="Inspiration links"
    )


class ShootUpdate(_ShootFields):
    """
    Schema for partially updating a shoot.

    Only fields present in the request body are written.
    """

    not_null_fields = frozenset({"title", "status"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    status: ShootStatus | None = None
    date: datetime | None = None
    duration_minutes: int | None = Field(default=None, gt=0)
    location_id: str | None = None
    location: str | None = None
    description: str | None = None
    notes: str | None = None
    instagram_links: list[str] | None = None

    # Written by the calendar and docs integrations
    calendar_event_id: str | None = None
    calendar_event_url: str | None = None
    docs_id: str | None = None
    docs_url: str | None = None


class CalendarEventRequest(CamelModel):
    """Optional body for POST /api/shoots/{id}/create-calendar-event."""

    reminder_minutes: int | None = Field(
        default=None,
        ge=0,
        le=40320,
        description="Popup reminder before the event (Google allows up to 4 weeks)"
    )
