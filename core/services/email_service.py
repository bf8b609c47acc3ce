# =============================================================================
# core/services/email_service.py - Shoot Reminder Emails (Resend)
# =============================================================================
# Sends one HTML reminder per participant with an email address, through
# the Resend REST API. All user-supplied text is HTML-escaped before it is
# placed in the message body.
#
# The HTTP request path only validates (prepare_reminders) and enqueues;
# the sending itself runs in the Celery worker (workers.tasks).
# =============================================================================

import html
import logging
from datetime import datetime
from typing import Any

import httpx

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime
from core.services.calendar_service import location_text
from core.services.shoot_items_service import ParticipantService
from core.services.shoot_service import ShootService
from app.config import settings
from app.exceptions import (
    ExternalServiceError,
    IntegrationNotConfiguredError,
    NoRecipientsError,
    ShootHasNoDateError,
)

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT = 15


def escape_html(value: Any) -> str:
    """Escape &, <, >, " and ' for safe interpolation into HTML."""
    return html.escape("" if value is None else str(value), quote=True)


def format_reminder_date(value: datetime) -> str:
    """Example: "Saturday, October 4, 2025 at 03:00 PM UTC"."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year} at {value:%I:%M %p} {value.tzname() or 'UTC'}"


def reminder_subject(title: str) -> str:
    return f"Reminder: {title} Photo Shoot"


def render_reminder_html(
    title: str,
    date: datetime,
    participant_name: str | None,
    location: str | None = None,
) -> str:
    """HTML body of a reminder email."""
    safe_title = escape_html(title)
    safe_name = escape_html(participant_name or "there")
    location_row = (
        f'\n          <p><strong>Where:</strong> {escape_html(location)}</p>' if location else ""
    )

    return f"""<!DOCTYPE html>
<html>
  <head>
    <style>
      body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }}
      .header {{ background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; border-radius: 10px 10px 0 0; text-align: center; }}
      .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
      .shoot-details {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #667eea; }}
      .footer {{ text-align: center; margin-top: 30px; color: #6b7280; font-size: 14px; }}
    </style>
  </head>
  <body>
    <div class="header">
      <h1>Photo Shoot Reminder</h1>
    </div>
    <div class="content">
      <p>Hi {safe_name},</p>
      <p>This is a friendly reminder about your upcoming cosplay photo shoot:</p>
      <div class="shoot-details">
          <h2>{safe_title}</h2>
          <p><strong>When:</strong> {escape_html(format_reminder_date(date))}</p>{location_row}
      </div>
      <p>Looking forward to seeing you there! Make sure you have all your costumes and props ready.</p>
      <div class="footer">
        <p>Sent from your Cosplay Photo Shoot Tracker</p>
      </div>
    </div>
  </body>
</html>
"""


def reminder_recipients(participants: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Participants that have a usable email address."""
    return [p for p in participants if (p.get("email") or "").strip()]


class EmailService:
    """
    Service for sending shoot reminder emails.

    Example:
        EmailService.prepare_reminders(shoot_id, team_id)   # validate in the API
        EmailService.send_shoot_reminders(shoot_id, team_id) # send in the worker
    """

    @staticmethod
    def ensure_configured() -> None:
        """
        Raises:
            IntegrationNotConfiguredError: RESEND_API_KEY or RESEND_FROM_EMAIL missing
        """
        if not settings.RESEND_API_KEY:
            raise IntegrationNotConfiguredError("Resend", env_var="RESEND_API_KEY")
        if not settings.RESEND_FROM_EMAIL:
            raise IntegrationNotConfiguredError("Resend", env_var="RESEND_FROM_EMAIL")

    @staticmethod
    def send_email(to: str, subject: str, html_body: str) -> str | None:
        """
        Send one email through Resend.

        Returns:
            Resend message id

        Raises:
            ExternalServiceError: Network failure or non-2xx response
        """
        EmailService.ensure_configured()

        try:
            response = httpx.post(
                RESEND_API_URL,
                headers={"Authorization": f"Bearer {settings.RESEND_API_KEY}"},
                json={
                    "from": settings.RESEND_FROM_EMAIL,
                    "to": [to],
                    "subject": subject,
                    "html": html_body,
                },
                timeout=REQUEST_TIMEOUT,
            )
        except httpx.HTTPError as e:
            raise ExternalServiceError("Resend", str(e))

        if response.status_code >= 400:
            raise ExternalServiceError("Resend", response.text[:200], upstream_status=response.status_code)

        return response.json().get("id")

    @staticmethod
    def prepare_reminders(shoot_id: str, team_id: str) -> tuple[dict[str, Any], list[dict[str, Any]]]:
        """
        Validate that reminders can be sent for a shoot.

        Returns:
            (shoot, recipients)

        Raises:
            ShootNotFoundError: Shoot not in team
            ShootHasNoDateError: Shoot has no date
            NoRecipientsError: No participant has an email
            IntegrationNotConfiguredError: Resend not configured
        """
        shoot = ShootService.get_shoot(shoot_id, team_id)
        if not parse_datetime(shoot.get("date")):
            raise ShootHasNoDateError(shoot_id)

        recipients = reminder_recipients(ParticipantService.list(shoot_id))
        if not recipients:
            raise NoRecipientsError(shoot_id)

        EmailService.ensure_configured()
        return shoot, recipients

    @staticmethod
    def send_shoot_reminders(shoot_id: str, team_id: str) -> dict[str, Any]:
        """
        Email every participant that has an address.

        One failed recipient does not stop the others.

        Returns:
            {"sent": int, "failed": int, "errors": [{"email", "error"}]}
        """
        shoot, recipients = EmailService.prepare_reminders(shoot_id, team_id)
        date = parse_datetime(shoot["date"])

        location = None
        if shoot.get("location_id"):
            location = SupabaseClient.fetch_one("locations", {"id": shoot["location_id"], "team_id": team_id})
        where = location_text(shoot, location)

        subject = reminder_subject(shoot.get("title") or "")
        sent = 0
        errors: list[dict[str, str]] = []

        for participant in recipients:
            email = participant["email"].strip()
            body = render_reminder_html(shoot.get("title") or "", date, participant.get("name"), where)
            try:
                EmailService.send_email(email, subject, body)
                sent += 1
            except ExternalServiceError as e:
                logger.warning(f"Reminder to {email} failed: {e.message}")
                errors.append({"email": email, "error": e.message})

        logger.info(f"Shoot {shoot_id} reminders: {sent} sent, {len(errors)} failed")
        return {"sent": sent, "failed": len(errors), "errors": errors}
