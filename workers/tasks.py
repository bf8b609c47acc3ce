# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks.
#
# Tasks:
# - send_shoot_reminders: Email every participant of a shoot via Resend
# =============================================================================

import logging
from typing import Any

from celery import shared_task, current_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def mark_started(message: str = "Processing...") -> None:
    """Report STARTED so pollers can tell a picked-up task from a queued one."""
    if current_task and current_task.request.id:
        current_task.update_state(state="STARTED", meta={"message": message})


# =============================================================================
# Reminder Emails
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_shoot_reminders")
def send_shoot_reminders(self, shoot_id: str, team_id: str) -> dict[str, Any]:
    """
    Send reminder emails for a shoot.

    Recipients are re-read from the database when the task runs, so
    participants added after queueing are included.

    Args:
        shoot_id: The shoot UUID
        team_id: The team the shoot belongs to

    Returns:
        Dict with:
        - sent: number of emails accepted by Resend
        - failed: number of recipients that failed
        - errors: [{email, error}] for each failure

    Raises:
        RuntimeError: The shoot can no longer be reminded (deleted, date
            cleared, no recipients, Resend unconfigured). The task ends
            in FAILURE with the message as its error.
    """
    from app.exceptions import ShootPlannerException
    from core.services.email_service import EmailService

    logger.info(f"Sending reminders for shoot {shoot_id}")
    mark_started("Sending reminder emails...")

    try:
        return EmailService.send_shoot_reminders(shoot_id, team_id)
    except ShootPlannerException as e:
        logger.warning(f"Reminders for shoot {shoot_id} not sent: {e.message}")
        # Plain exception type so the JSON result backend can rebuild it
        raise RuntimeError(e.message) from e
