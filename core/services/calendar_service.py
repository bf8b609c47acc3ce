# =============================================================================
# core/services/calendar_service.py - Google Calendar Sync
# =============================================================================
# Mirrors a dated shoot as a Google Calendar event on the configured
# calendar (GOOGLE_CALENDAR_ID, "primary" by default). The event id and
# link are stored back on the shoot so later syncs update in place.
# =============================================================================

import logging
from datetime import timedelta, timezone
from typing import Any

from googleapiclient.errors import HttpError

from lib.google_client import build_calendar_service
from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime
from core.services.shoot_service import ShootService
from app.config import settings
from app.exceptions import BadRequestError, ExternalServiceError, ShootHasNoDateError

logger = logging.getLogger(__name__)


def location_text(shoot: dict[str, Any], location: dict[str, Any] | None = None) -> str | None:
    """
    Human-readable location for a shoot.

    A linked team location wins over the free-text field.
    """
    if location:
        parts = [location.get("name"), location.get("address")]
        text = ", ".join(p for p in parts if p)
        if text:
            return text
    return shoot.get("location") or None


def build_event(
    shoot: dict[str, Any],
    location: str | None = None,
    reminder_minutes: int | None = None,
) -> dict[str, Any]:
    """
    Calendar event body for a shoot.

    Runs from the shoot date for duration_minutes (or the configured
    default), expressed in UTC.

    Raises:
        ShootHasNoDateError: If the shoot has no date
    """
    start = parse_datetime(shoot.get("date"))
    if start is None:
        raise ShootHasNoDateError(shoot.get("id"))

    start = start.astimezone(timezone.utc)
    duration = shoot.get("duration_minutes") or settings.DEFAULT_SHOOT_DURATION_MINUTES
    end = start + timedelta(minutes=duration)

    event: dict[str, Any] = {
        "summary": shoot.get("title"),
        "start": {"dateTime": start.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": end.isoformat(), "timeZone": "UTC"},
    }
    if shoot.get("description"):
        event["description"] = shoot["description"]
    if location:
        event["location"] = location
    if reminder_minutes is not None:
        event["reminders"] = {
            "useDefault": False,
            "overrides": [{"method": "popup", "minutes": reminder_minutes}],
        }
    return event


def _status_of(error: HttpError) -> int | None:
    return getattr(error.resp, "status", None)


class CalendarService:
    """
    Service for Google Calendar operations.

    Example:
        CalendarService.sync_shoot_event(shoot_id, team_id)
        # -> {"event_id": "...", "event_url": "https://www.google.com/calendar/event?eid=..."}
    """

    @staticmethod
    def _linked_location(shoot: dict[str, Any], team_id: str) -> dict[str, Any] | None:
        if not shoot.get("location_id"):
            return None
        return SupabaseClient.fetch_one("locations", {"id": shoot["location_id"], "team_id": team_id})

    @staticmethod
    def sync_shoot_event(
        shoot_id: str,
        team_id: str,
        reminder_minutes: int | None = None,
    ) -> dict[str, str]:
        """
        Create or update the shoot's calendar event.

        An event deleted on the Google side is recreated.

        Returns:
            {"event_id", "event_url"}

        Raises:
            ShootHasNoDateError: Shoot has no date
            IntegrationNotConfiguredError: No service account configured
            ExternalServiceError: Google rejected the request
        """
        shoot = ShootService.get_shoot(shoot_id, team_id)
        location = location_text(shoot, CalendarService._linked_location(shoot, team_id))
        event = build_event(shoot, location=location, reminder_minutes=reminder_minutes)

        service = build_calendar_service()
        calendar_id = settings.GOOGLE_CALENDAR_ID
        existing_id = shoot.get("calendar_event_id")

        try:
            result = None
            if existing_id:
                try:
                    result = service.events().update(
                        calendarId=calendar_id,
                        eventId=existing_id,
                        body=event,
                    ).execute()
                    logger.info(f"Updated calendar event {existing_id} for shoot {shoot_id}")
                except HttpError as e:
                    if _status_of(e) not in (404, 410):
                        raise
                    logger.info(f"Calendar event {existing_id} is gone, creating a new one")

            if result is None:
                result = service.events().insert(calendarId=calendar_id, body=event).execute()
                logger.info(f"Created calendar event {result.get('id')} for shoot {shoot_id}")

        except HttpError as e:
            raise ExternalServiceError("Google Calendar", str(e), upstream_status=_status_of(e))

        event_id = result.get("id")
        event_url = result.get("htmlLink")
        if not event_id:
            raise ExternalServiceError("Google Calendar", "Response did not include an event id")

        ShootService.update_shoot(shoot_id, team_id, {
            "calendar_event_id": event_id,
            "calendar_event_url": event_url,
        })
        return {"event_id": event_id, "event_url": event_url}

    @staticmethod
    def delete_shoot_event(shoot_id: str, team_id: str) -> None:
        """
        Remove the shoot's calendar event and clear the stored link.

        Raises:
            BadRequestError: Shoot has no calendar event
            ExternalServiceError: Google rejected the request
        """
        shoot = ShootService.get_shoot(shoot_id, team_id)
        event_id = shoot.get("calendar_event_id")
        if not event_id:
            raise BadRequestError(
                "Shoot has no calendar event",
                code="NO_CALENDAR_EVENT",
                suggestion="Create one with POST /api/shoots/{id}/create-calendar-event",
            )

        service = build_calendar_service()
        try:
            service.events().delete(calendarId=settings.GOOGLE_CALENDAR_ID, eventId=event_id).execute()
        except HttpError as e:
            if _status_of(e) not in (404, 410):
                raise ExternalServiceError("Google Calendar", str(e), upstream_status=_status_of(e))
            logger.info(f"Calendar event {event_id} was already deleted")

        ShootService.update_shoot(shoot_id, team_id, {
            "calendar_event_id": None,
            "calendar_event_url": None,
        })
