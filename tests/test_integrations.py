# =============================================================================
# tests/test_integrations.py - Google Calendar & Docs Tests
# =============================================================================
# Tests for:
# - Calendar event body construction and create-vs-update sync
# - Docs request building (sections, running indices)
# - Docs export create-vs-refresh
# - 503 when Google credentials are not configured
#
# Google API clients are replaced with MagicMock service objects.
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError

from app.config import settings
from app.exceptions import ExternalServiceError, ShootHasNoDateError
from core.services.calendar_service import CalendarService, build_event, location_text
from core.services.docs_service import (
    DocsService,
    build_document_requests,
    format_duration,
)


def _http_error(status: int) -> HttpError:
    return HttpError(MagicMock(status=status, reason="error"), b"{}")


@pytest.fixture
def dated_shoot(fake_db, team_ctx):
    return fake_db.add("shoots", {
        "team_id": team_ctx.team_id,
        "title": "Frieren autumn",
        "status": "ready to shoot",
        "date": "2025-10-04T15:00:00+00:00",
        "duration_minutes": 90,
        "location": "Botanic Garden",
    })


# =============================================================================
# Calendar
# =============================================================================

class TestBuildEvent:
    def test_times_and_location(self):
        event = build_event(
            {"title": "Shoot", "date": "2025-10-04T17:00:00+02:00", "duration_minutes": 90},
            location="Park",
        )

        assert event["summary"] == "Shoot"
        assert event["start"]["dateTime"] == "2025-10-04T15:00:00+00:00"
        assert event["end"]["dateTime"] == "2025-10-04T16:30:00+00:00"
        assert event["location"] == "Park"
        assert "reminders" not in event

    def test_default_duration(self):
        event = build_event({"title": "Shoot", "date": "2025-10-04T15:00:00Z"})
        assert event["end"]["dateTime"] == "2025-10-04T17:00:00+00:00"

    def test_reminder_override(self):
        event = build_event({"title": "Shoot", "date": "2025-10-04T15:00:00Z"}, reminder_minutes=60)
        assert event["reminders"] == {"useDefault": False, "overrides": [{"method": "popup", "minutes": 60}]}

    def test_no_date(self):
        with pytest.raises(ShootHasNoDateError):
            build_event({"id": "s1", "title": "Shoot"})

    def test_location_text_prefers_linked(self):
        shoot = {"location": "free text"}
        assert location_text(shoot, {"name": "Garden", "address": "1 Main St"}) == "Garden, 1 Main St"
        assert location_text(shoot, None) == "free text"


class TestCalendarSync:
    def test_creates_event_and_stores_link(self, fake_db, team_ctx, dated_shoot):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.return_value = {
            "id": "evt1",
            "htmlLink": "https://calendar.google.com/event?eid=evt1",
        }

        with patch("core.services.calendar_service.build_calendar_service", return_value=service):
            result = CalendarService.sync_shoot_event(dated_shoot["id"], team_ctx.team_id, reminder_minutes=30)

        assert result == {"event_id": "evt1", "event_url": "https://calendar.google.com/event?eid=evt1"}
        kwargs = service.events.return_value.insert.call_args.kwargs
        assert kwargs["calendarId"] == settings.GOOGLE_CALENDAR_ID
        assert kwargs["body"]["location"] == "Botanic Garden"
        stored = fake_db.rows("shoots", id=dated_shoot["id"])[0]
        assert stored["calendar_event_id"] == "evt1"

    def test_updates_existing_event(self, fake_db, team_ctx, dated_shoot):
        fake_db.rows("shoots", id=dated_shoot["id"])[0]["calendar_event_id"] = "evt1"
        service = MagicMock()
        service.events.return_value.update.return_value.execute.return_value = {"id": "evt1", "htmlLink": "link"}

        with patch("core.services.calendar_service.build_calendar_service", return_value=service):
            CalendarService.sync_shoot_event(dated_shoot["id"], team_ctx.team_id)

        assert service.events.return_value.update.call_args.kwargs["eventId"] == "evt1"
        service.events.return_value.insert.assert_not_called()

    def test_recreates_deleted_event(self, fake_db, team_ctx, dated_shoot):
        fake_db.rows("shoots", id=dated_shoot["id"])[0]["calendar_event_id"] = "gone"
        service = MagicMock()
        service.events.return_value.update.return_value.execute.side_effect = _http_error(404)
        service.events.return_value.insert.return_value.execute.return_value = {"id": "evt2", "htmlLink": "link2"}

        with patch("core.services.calendar_service.build_calendar_service", return_value=service):
            result = CalendarService.sync_shoot_event(dated_shoot["id"], team_ctx.team_id)

        assert result["event_id"] == "evt2"
        assert fake_db.rows("shoots", id=dated_shoot["id"])[0]["calendar_event_id"] == "evt2"

    def test_google_failure_is_502(self, fake_db, team_ctx, dated_shoot):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.side_effect = _http_error(403)

        with patch("core.services.calendar_service.build_calendar_service", return_value=service):
            with pytest.raises(ExternalServiceError) as exc_info:
                CalendarService.sync_shoot_event(dated_shoot["id"], team_ctx.team_id)
        assert exc_info.value.status_code == 502

    def test_route_without_credentials_is_503(self, client, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_SERVICE_ACCOUNT", None)
        shoot = client.post("/api/shoots", json={"title": "x", "date": "2025-10-04T15:00:00Z"}, headers=auth_headers).json()

        response = client.post(f"/api/shoots/{shoot['id']}/create-calendar-event", headers=auth_headers)

        assert response.status_code == 503
        assert response.json()["code"] == "INTEGRATION_NOT_CONFIGURED"

    def test_route_without_date_is_400(self, client, auth_headers):
        shoot = client.post("/api/shoots", json={"title": "x"}, headers=auth_headers).json()

        response = client.post(f"/api/shoots/{shoot['id']}/create-calendar-event", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "SHOOT_HAS_NO_DATE"

    def test_route_returns_camel_case(self, client, auth_headers):
        shoot = client.post("/api/shoots", json={"title": "x", "date": "2025-10-04T15:00:00Z"}, headers=auth_headers).json()
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.return_value = {"id": "evt1", "htmlLink": "link"}

        with patch("core.services.calendar_service.build_calendar_service", return_value=service):
            response = client.post(
                f"/api/shoots/{shoot['id']}/create-calendar-event",
                json={"reminderMinutes": 120},
                headers=auth_headers,
            )

        assert response.status_code == 200
        assert response.json() == {"eventId": "evt1", "eventUrl": "link"}


# =============================================================================
# Docs
# =============================================================================

def _inserted_text(requests):
    return "".join(r["insertText"]["text"] for r in requests if "insertText" in r)


class TestBuildDocumentRequests:
    def test_sections_in_order(self):
        shoot = {
            "title": "Frieren autumn",
            "status": "planning",
            "date": "2025-10-04T15:00:00Z",
            "duration_minutes": 150,
            "notes": "Bring the staff",
            "instagram_links": ["https://instagram.com/p/a"],
        }
        details = {
            "location": {"name": "Botanic Garden", "address": "1 Main St"},
            "costumes": [{"character_name": "Frieren", "series_name": "Sousou no Frieren"}],
            "participants": [{"name": "Ana", "role": "Model", "email": "ana@example.com"}],
            "equipment": [{"name": "AD200", "category": "Lighting", "quantity": 2}],
            "props": [{"name": "Staff"}],
            "references": [{"url": "https://example.com/pose.png", "title": "Pose"}],
        }

        text = _inserted_text(build_document_requests(shoot, details))

        headings = ["Shoot Details", "Location", "Notes", "Characters/Costumes", "Team", "Equipment", "Props", "Reference Links"]
        positions = [text.index(f"{h}\n") for h in headings]
        assert positions == sorted(positions)
        assert text.startswith("Frieren autumn\n")
        assert "Duration: 2h 30m\n" in text
        assert "• Frieren - Sousou no Frieren\n" in text
        assert "• Ana - Model (ana@example.com)\n" in text
        assert "• AD200 (Lighting) x2\n" in text
        assert "• Pose: https://example.com/pose.png\n" in text

    def test_reference_links_listed_once(self):
        shoot = {"title": "Shoot", "instagram_links": ["https://instagram.com/p/a"]}
        details = {"references": [
            {"url": "https://x/a", "title": "Pose"},
            {"url": "https://x/a", "title": "Pose"},
            {"url": "https://instagram.com/p/a", "title": "Same post"},
        ]}

        text = _inserted_text(build_document_requests(shoot, details))

        assert text.count("• Pose: https://x/a\n") == 1
        assert text.count("https://instagram.com/p/a") == 1

    def test_empty_sections_omitted(self):
        text = _inserted_text(build_document_requests({"title": "Bare"}, {}))

        assert "Shoot Details" in text
        for heading in ("Location", "Notes", "Team", "Equipment", "Props", "Reference Links"):
            assert heading not in text

    def test_running_indices(self):
        requests = build_document_requests({"title": "Café ✨"}, {})
        inserts = [r["insertText"] for r in requests if "insertText" in r]

        assert inserts[0]["location"]["index"] == 1
        # "✨" is one UTF-16 unit, "Café ✨\n" is 7 units
        assert inserts[1]["location"]["index"] == 8
        for previous, current in zip(inserts, inserts[1:]):
            length = len(previous["text"].encode("utf-16-le")) // 2
            assert current["location"]["index"] == previous["location"]["index"] + length

    def test_title_style_range(self):
        requests = build_document_requests({"title": "Shoot"}, {})
        style = requests[1]["updateTextStyle"]
        assert style["range"] == {"startIndex": 1, "endIndex": 7}
        assert style["textStyle"]["bold"] is True

    def test_format_duration(self):
        assert format_duration(45) == "45m"
        assert format_duration(120) == "2h 0m"
        assert format_duration(None) is None


class TestDocsExport:
    def test_creates_document(self, fake_db, team_ctx, dated_shoot):
        docs = MagicMock()
        docs.documents.return_value.create.return_value.execute.return_value = {"documentId": "doc1"}
        drive = MagicMock()
        drive.files.return_value.get.return_value.execute.return_value = {"webViewLink": "https://docs.google.com/document/d/doc1/view"}

        with patch("core.services.docs_service.build_docs_service", return_value=docs), \
                patch("core.services.docs_service.build_drive_service", return_value=drive):
            result = DocsService.export_shoot_document(dated_shoot["id"], team_ctx.team_id)

        assert result == {"doc_id": "doc1", "doc_url": "https://docs.google.com/document/d/doc1/view"}
        batch = docs.documents.return_value.batchUpdate.call_args.kwargs
        assert batch["documentId"] == "doc1"
        assert batch["body"]["requests"][0]["insertText"]["text"] == "Frieren autumn\n"
        assert fake_db.rows("shoots", id=dated_shoot["id"])[0]["docs_id"] == "doc1"

    def test_refreshes_existing_document(self, fake_db, team_ctx, dated_shoot):
        row = fake_db.rows("shoots", id=dated_shoot["id"])[0]
        row["docs_id"] = "doc1"
        row["docs_url"] = "https://docs.google.com/document/d/doc1/edit"
        docs = MagicMock()
        docs.documents.return_value.get.return_value.execute.return_value = {
            "body": {"content": [{"endIndex": 1}, {"endIndex": 40}]}
        }

        with patch("core.services.docs_service.build_docs_service", return_value=docs), \
                patch("core.services.docs_service.build_drive_service") as drive_factory:
            result = DocsService.export_shoot_document(dated_shoot["id"], team_ctx.team_id)

        assert result["doc_id"] == "doc1"
        docs.documents.return_value.create.assert_not_called()
        drive_factory.assert_not_called()
        calls = docs.documents.return_value.batchUpdate.call_args_list
        first_request = calls[0].kwargs["body"]["requests"][0]
        assert first_request == {"deleteContentRange": {"range": {"startIndex": 1, "endIndex": 39}}}

    def test_route_returns_camel_case(self, client, auth_headers):
        shoot = client.post("/api/shoots", json={"title": "x"}, headers=auth_headers).json()

        with patch("core.services.docs_service.DocsService.export_shoot_document",
                   return_value={"doc_id": "d", "doc_url": "u"}) as export:
            response = client.post(f"/api/shoots/{shoot['id']}/docs", headers=auth_headers)

        assert response.json() == {"docId": "d", "docUrl": "u"}
        assert export.call_args.args[0] == shoot["id"]
