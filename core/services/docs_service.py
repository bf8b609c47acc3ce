# =============================================================================
# core/services/docs_service.py - Google Docs Shoot Plan Export
# =============================================================================
# Renders a shoot (with its location, participants, costumes, equipment,
# props and links) into a Google Doc. The first export creates the document;
# later exports clear it and write the content again so the link the team
# shared stays valid.
#
# build_document_requests() is pure: it returns the Docs batchUpdate
# requests (insertText + updateTextStyle) with running indices.
# =============================================================================

import logging
from typing import Any

from googleapiclient.errors import HttpError

from lib.google_client import build_docs_service, build_drive_service
from lib.utils import parse_datetime
from core.services.shoot_service import ShootService
from app.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

TITLE_STYLE = {"bold": True, "fontSize": {"magnitude": 24, "unit": "PT"}}
HEADING_STYLE = {"bold": True, "fontSize": {"magnitude": 16, "unit": "PT"}}


def doc_url(doc_id: str) -> str:
    return f"https://docs.google.com/document/d/{doc_id}/edit"


def format_duration(minutes: int | None) -> str | None:
    """
    Example:
        format_duration(150) -> "2h 30m"
        format_duration(45) -> "45m"
    """
    if not minutes:
        return None
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def format_long_date(value: Any) -> str | None:
    """Example: "Saturday, October 4, 2025 at 15:00 UTC"."""
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return f"{parsed:%A}, {parsed:%B} {parsed.day}, {parsed.year} at {parsed:%H:%M} {parsed.tzname() or 'UTC'}"


def _doc_length(text: str) -> int:
    # Docs indices count UTF-16 code units, not code points
    return len(text.encode("utf-16-le")) // 2


class _DocumentBuilder:
    """Accumulates requests while tracking the insertion index."""

    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self.index = 1

    def add(self, text: str, style: dict[str, Any] | None = None) -> None:
        length = _doc_length(text)
        self.requests.append({
            "insertText": {
                "location": {"index": self.index},
                "text": text,
            }
        })
        if style:
            self.requests.append({
                "updateTextStyle": {
                    "range": {"startIndex": self.index, "endIndex": self.index + length},
                    "textStyle": style,
                    "fields": ",".join(style.keys()),
                }
            })
        self.index += length

    def heading(self, text: str) -> None:
        self.add(f"{text}\n", HEADING_STYLE)


def build_document_requests(shoot: dict[str, Any], details: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Docs batchUpdate requests for a shoot plan.

    Section order: title, Shoot Details, Location, Notes,
    Characters/Costumes, Team, Equipment, Props, Reference Links.
    Sections with nothing to show are left out.

    Args:
        shoot: Shoot row
        details: Output of ShootService.get_shoot_details()
    """
    doc = _DocumentBuilder()

    doc.add(f"{shoot.get('title') or 'Untitled Shoot'}\n", TITLE_STYLE)
    doc.add("\n")

    doc.heading("Shoot Details")
    doc.add(f"Status: {shoot.get('status') or 'idea'}\n")
    date_text = format_long_date(shoot.get("date"))
    if date_text:
        doc.add(f"Date: {date_text}\n")
    duration = format_duration(shoot.get("duration_minutes"))
    if duration:
        doc.add(f"Duration: {duration}\n")
    doc.add("\n")

    location = details.get("location")
    if location:
        doc.heading("Location")
        doc.add(f"{location.get('name')}\n")
        if location.get("address"):
            doc.add(f"{location['address']}\n")
        if location.get("notes"):
            doc.add(f"Notes: {location['notes']}\n")
        doc.add("\n")
    elif shoot.get("location"):
        doc.heading("Location")
        doc.add(f"{shoot['location']}\n\n")

    if shoot.get("notes"):
        doc.heading("Notes")
        doc.add(f"{shoot['notes']}\n\n")

    costumes = details.get("costumes") or []
    if costumes:
        doc.heading("Characters/Costumes")
        for costume in costumes:
            doc.add(f"• {costume.get('character_name')}")
            if costume.get("series_name"):
                doc.add(f" - {costume['series_name']}")
            doc.add("\n")
        doc.add("\n")

    participants = details.get("participants") or []
    if participants:
        doc.heading("Team")
        for participant in participants:
            doc.add(f"• {participant.get('name')}")
            if participant.get("role"):
                doc.add(f" - {participant['role']}")
            if participant.get("email"):
                doc.add(f" ({participant['email']})")
            doc.add("\n")
        doc.add("\n")

    equipment = details.get("equipment") or []
    if equipment:
        doc.heading("Equipment")
        for item in equipment:
            doc.add(f"• {item.get('name')}")
            if item.get("category"):
                doc.add(f" ({item['category']})")
            if (item.get("quantity") or 1) > 1:
                doc.add(f" x{item['quantity']}")
            doc.add("\n")
        doc.add("\n")

    props = details.get("props") or []
    if props:
        doc.heading("Props")
        for prop in props:
            doc.add(f"• {prop.get('name')}\n")
        doc.add("\n")

    links = list(dict.fromkeys(shoot.get("instagram_links") or []))
    seen = set(links)
    for reference in details.get("references") or []:
        url = reference.get("url")
        if url and url not in seen:
            seen.add(url)
            links.append(f"{reference['title']}: {url}" if reference.get("title") else url)
    if links:
        doc.heading("Reference Links")
        for link in links:
            doc.add(f"• {link}\n")
        doc.add("\n")

    return doc.requests


class DocsService:
    """
    Service for exporting shoot plans to Google Docs.

    Example:
        DocsService.export_shoot_document(shoot_id, team_id)
        # -> {"doc_id": "...", "doc_url": "https://docs.google.com/document/d/.../edit"}
    """

    @staticmethod
    def _create_document(docs, title: str) -> str:
        doc = docs.documents().create(body={"title": title}).execute()
        return doc["documentId"]

    @staticmethod
    def _clear_document(docs, doc_id: str) -> None:
        doc = docs.documents().get(documentId=doc_id).execute()
        content = (doc.get("body") or {}).get("content") or []
        end_index = content[-1].get("endIndex", 1) if content else 1

        # The final newline of a document can't be deleted
        if end_index - 1 > 1:
            docs.documents().batchUpdate(
                documentId=doc_id,
                body={"requests": [{
                    "deleteContentRange": {"range": {"startIndex": 1, "endIndex": end_index - 1}}
                }]},
            ).execute()

    @staticmethod
    def export_shoot_document(shoot_id: str, team_id: str) -> dict[str, str]:
        """
        Create or refresh the shoot's planning document.

        A document deleted on the Google side is recreated.

        Returns:
            {"doc_id", "doc_url"}

        Raises:
            IntegrationNotConfiguredError: No service account configured
            ExternalServiceError: Google rejected the request
        """
        details = ShootService.get_shoot_details(shoot_id, team_id)
        shoot = details["shoot"]
        requests = build_document_requests(shoot, details)

        docs = build_docs_service()
        doc_id = shoot.get("docs_id")
        url = None

        try:
            if doc_id:
                try:
                    DocsService._clear_document(docs, doc_id)
                    url = shoot.get("docs_url") or doc_url(doc_id)
                except HttpError as e:
                    if getattr(e.resp, "status", None) != 404:
                        raise
                    logger.info(f"Document {doc_id} is gone, creating a new one")
                    doc_id = None

            if not doc_id:
                doc_id = DocsService._create_document(docs, f"{shoot.get('title')} - Shoot Plan")
                drive = build_drive_service()
                file = drive.files().get(fileId=doc_id, fields="webViewLink").execute()
                url = file.get("webViewLink") or doc_url(doc_id)
                logger.info(f"Created document {doc_id} for shoot {shoot_id}")

            docs.documents().batchUpdate(documentId=doc_id, body={"requests": requests}).execute()

        except HttpError as e:
            raise ExternalServiceError("Google Docs", str(e), upstream_status=getattr(e.resp, "status", None))

        ShootService.update_shoot(shoot_id, team_id, {"docs_id": doc_id, "docs_url": url})
        return {"doc_id": doc_id, "doc_url": url}
