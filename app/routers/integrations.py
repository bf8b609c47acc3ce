# =============================================================================
# app/routers/integrations.py - Shoot Integration Endpoints
# =============================================================================
# Mounted under /api/shoots:
#   POST   /{shoot_id}/create-calendar-event   Google Calendar create/update
#   DELETE /{shoot_id}/calendar-event          Google Calendar delete
#   POST   /{shoot_id}/docs                    Google Docs plan export
#   POST   /{shoot_id}/send-reminders          Queue Resend reminder emails
#
# Missing credentials answer 503, upstream failures 502.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from app.dependencies import TeamDep
from core.models.shoot import CalendarEventRequest

logger = logging.getLogger(__name__)

router = APIRouter()

ShootId = Annotated[UUID, Path(description="Shoot UUID")]


@router.post("/{shoot_id}/create-calendar-event")
async def create_calendar_event(
    shoot_id: ShootId,
    ctx: TeamDep,
    body: CalendarEventRequest | None = None,
):
    """
    Create the shoot's Google Calendar event, or update it if one exists.

    Raises:
        400: Shoot has no date
        503: GOOGLE_SERVICE_ACCOUNT not configured
    """
    from core.services.calendar_service import CalendarService

    result = CalendarService.sync_shoot_event(
        str(shoot_id),
        ctx.team_id,
        reminder_minutes=body.reminder_minutes if body else None,
    )
    return {"eventId": result["event_id"], "eventUrl": result["event_url"]}


@router.delete("/{shoot_id}/calendar-event", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calendar_event(shoot_id: ShootId, ctx: TeamDep):
    """Delete the shoot's calendar event and clear the stored link."""
    from core.services.calendar_service import CalendarService

    CalendarService.delete_shoot_event(str(shoot_id), ctx.team_id)


@router.post("/{shoot_id}/docs")
async def export_shoot_document(shoot_id: ShootId, ctx: TeamDep):
    """
    Write the shoot plan to Google Docs.

    The first call creates the document; later calls rewrite it in place.
    """
    from core.services.docs_service import DocsService

    result = DocsService.export_shoot_document(str(shoot_id), ctx.team_id)
    return {"docId": result["doc_id"], "docUrl": result["doc_url"]}


@router.post("/{shoot_id}/send-reminders", status_code=status.HTTP_202_ACCEPTED)
async def send_reminders(shoot_id: ShootId, ctx: TeamDep):
    """
    Queue reminder emails to every participant with an email address.

    Validation (date, recipients, Resend configuration) happens here so
    the client gets an immediate 400/503; sending runs in the worker.
    Poll GET /api/tasks/{taskId} for the outcome.
    """
    from core.services.email_service import EmailService
    from workers.tasks import send_shoot_reminders

    _, recipients = EmailService.prepare_reminders(str(shoot_id), ctx.team_id)

    task = send_shoot_reminders.delay(str(shoot_id), ctx.team_id)
    logger.info(f"Queued reminders for shoot {shoot_id}: task {task.id}")

    return {
        "taskId": task.id,
        "status": "PENDING",
        "recipients": len(recipients),
    }
