# =============================================================================
# lib/google_client.py - Google API Client Factory
# =============================================================================
# Builds authenticated Google API service objects (Calendar, Docs, Drive)
# from a service-account key supplied as JSON in GOOGLE_SERVICE_ACCOUNT.
#
# Clients are built per call and never shared between requests. The calls
# are blocking and run on the event loop from the async handlers.
# =============================================================================

import logging
from typing import Any

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from app.config import settings
from app.exceptions import IntegrationNotConfiguredError

logger = logging.getLogger(__name__)

CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]

DOCS_SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive.file",
]


def get_service_account_credentials(scopes: list[str]) -> Credentials:
    """
    Load service-account credentials for the given scopes.

    Raises:
        IntegrationNotConfiguredError: If the key is missing or malformed
    """
    info: dict[str, Any] | None = settings.google_service_account_info
    if not info:
        raise IntegrationNotConfiguredError(
            "Google",
            env_var="GOOGLE_SERVICE_ACCOUNT",
        )

    if not info.get("client_email") or not info.get("private_key"):
        raise IntegrationNotConfiguredError(
            "Google",
            env_var="GOOGLE_SERVICE_ACCOUNT",
            reason="Service account key is missing client_email or private_key",
        )

    try:
        return Credentials.from_service_account_info(info, scopes=scopes)
    except ValueError as e:
        raise IntegrationNotConfiguredError(
            "Google",
            env_var="GOOGLE_SERVICE_ACCOUNT",
            reason=f"Invalid service account key: {e}",
        )


def build_calendar_service():
    """Build a Google Calendar v3 service object."""
    credentials = get_service_account_credentials(CALENDAR_SCOPES)
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


def build_docs_service():
    """Build a Google Docs v1 service object."""
    credentials = get_service_account_credentials(DOCS_SCOPES)
    return build("docs", "v1", credentials=credentials, cache_discovery=False)


def build_drive_service():
    """Build a Google Drive v3 service object."""
    credentials = get_service_account_credentials(DOCS_SCOPES)
    return build("drive", "v3", credentials=credentials, cache_discovery=False)
