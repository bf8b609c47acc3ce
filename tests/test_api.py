# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# Exercises the FastAPI app end to end over the in-memory database:
# - Status codes (201/204 and 400/401/403/404/500 error mapping)
# - camelCase responses
# - Team scoping and route ordering under /api/shoots
# =============================================================================

import logging
import uuid
from unittest.mock import patch

from app.middleware import format_request_line


def _create_shoot(client, headers, **body):
    body.setdefault("title", "Frieren autumn")
    response = client.post("/api/shoots", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Health & Root
# =============================================================================

class TestHealth:
    def test_health_needs_no_auth(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_checks_database_and_storage(self, client):
        body = client.get("/api/health/ready").json()
        assert body["status"] == "ready"
        assert body["checks"] == {"database": "healthy", "storage": "healthy"}

    def test_readiness_degraded_when_database_fails(self, client, fake_db):
        fake_db.failing_tables.add("teams")

        body = client.get("/api/health/ready").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")
        assert body["checks"]["storage"] == "healthy"

    def test_readiness_reports_integrations(self, client, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "GOOGLE_SERVICE_ACCOUNT", None)
        monkeypatch.setattr(settings, "MAPBOX_ACCESS_TOKEN", "pk.test")

        integrations = client.get("/api/health/ready").json()["integrations"]

        assert integrations["calendar"] is False
        assert integrations["docs"] is False
        assert integrations["mapbox"] is True

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/health"


# =============================================================================
# Error mapping
# =============================================================================

class TestErrorMapping:
    def test_missing_token_is_401(self, client):
        response = client.get("/api/shoots")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_validation_error_is_400(self, client, auth_headers):
        response = client.post("/api/shoots", json={"title": ""}, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["field"] == "title"

    def test_bad_uuid_is_400(self, client, auth_headers):
        response = client.get("/api/shoots/not-a-uuid", headers=auth_headers)
        assert response.status_code == 400

    def test_unknown_shoot_is_404(self, client, auth_headers):
        response = client.get(f"/api/shoots/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "SHOOT_NOT_FOUND"

    def test_switching_to_foreign_team_is_403(self, client, auth_headers, fake_db):
        team = fake_db.add("teams", {"name": "Not mine"})

        response = client.post("/api/user/active-team", json={"teamId": team["id"]}, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "NOT_TEAM_MEMBER"

    def test_database_failure_is_500(self, client, auth_headers, fake_db):
        fake_db.failing_tables.add("shoots")

        response = client.get("/api/shoots", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["code"] == "LIST_FAILED"

    def test_unexpected_error_is_500(self, client, auth_headers):
        with patch("app.routers.shoots.ShootService.list_shoots", side_effect=RuntimeError("boom")):
            response = client.get("/api/shoots", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"detail": "boom", "code": "INTERNAL_ERROR"}


# =============================================================================
# Shoots
# =============================================================================

class TestShootRoutes:
    def test_create_returns_camel_case(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers, durationMinutes=90, instagramLinks=["https://instagram.com/p/a"])

        assert shoot["durationMinutes"] == 90
        assert shoot["instagramLinks"] == ["https://instagram.com/p/a"]
        assert "teamId" in shoot

    def test_list_filters_by_status(self, client, auth_headers):
        _create_shoot(client, auth_headers, title="Idea")
        _create_shoot(client, auth_headers, title="Ready", status="ready-to-shoot")

        response = client.get("/api/shoots", params={"status": "Ready_To_Shoot"}, headers=auth_headers)

        assert [s["title"] for s in response.json()] == ["Ready"]

    def test_patch_and_delete(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)

        patched = client.patch(f"/api/shoots/{shoot['id']}", json={"notes": "golden hour"}, headers=auth_headers)
        assert patched.json()["notes"] == "golden hour"

        deleted = client.delete(f"/api/shoots/{shoot['id']}", headers=auth_headers)
        assert deleted.status_code == 204
        assert client.get(f"/api/shoots/{shoot['id']}", headers=auth_headers).status_code == 404

    def test_patch_null_required_column_is_400(self, client, auth_headers, fake_db):
        shoot = _create_shoot(client, auth_headers)

        response = client.patch(
            f"/api/shoots/{shoot['id']}", json={"title": None, "status": None}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert {e["field"] for e in response.json()["errors"]} == {"title", "status"}
        stored = fake_db.rows("shoots", id=shoot["id"])[0]
        assert (stored["title"], stored["status"]) == ("Frieren autumn", "idea")

    def test_other_team_shoot_is_404(self, client, auth_headers, make_token, fake_db):
        shoot = _create_shoot(client, auth_headers)
        outsider = {"Authorization": f"Bearer {make_token()}"}

        assert client.get(f"/api/shoots/{shoot['id']}", headers=outsider).status_code == 404
        assert client.delete(f"/api/shoots/{shoot['id']}", headers=outsider).status_code == 404
        assert fake_db.rows("shoots", id=shoot["id"])

    def test_details_route_not_captured_by_kind_route(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)

        response = client.get(f"/api/shoots/{shoot['id']}/details", headers=auth_headers)

        assert response.status_code == 200
        assert set(response.json()) == {"shoot", "location", "participants", "references", "equipment", "props", "costumes"}

    def test_unknown_kind_is_400(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)
        response = client.get(f"/api/shoots/{shoot['id']}/vehicles", headers=auth_headers)
        assert response.status_code == 400


# =============================================================================
# Shoot items
# =============================================================================

class TestShootItemRoutes:
    def test_participant_lifecycle(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)
        base = f"/api/shoots/{shoot['id']}/participants"

        created = client.post(base, json={"name": "Ana", "role": "Model", "email": "ana@example.com"}, headers=auth_headers)
        assert created.status_code == 201
        pid = created.json()["id"]

        updated = client.patch(f"{base}/{pid}", json={"role": "Photographer"}, headers=auth_headers)
        assert updated.json()["role"] == "Photographer"

        assert client.delete(f"{base}/{pid}", headers=auth_headers).status_code == 204
        assert client.get(base, headers=auth_headers).json() == []

    def test_null_required_item_fields_are_400(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)
        base = f"/api/shoots/{shoot['id']}"
        pid = client.post(f"{base}/participants", json={"name": "Ana", "role": "Model"}, headers=auth_headers).json()["id"]
        rid = client.post(f"{base}/references", json={"type": "link", "url": "https://x/a"}, headers=auth_headers).json()["id"]

        assert client.patch(f"{base}/participants/{pid}", json={"role": None}, headers=auth_headers).status_code == 400
        assert client.patch(f"{base}/references/{rid}", json={"url": None}, headers=auth_headers).status_code == 400
        # Optional columns can still be cleared
        cleared = client.patch(f"{base}/participants/{pid}", json={"email": None}, headers=auth_headers)
        assert cleared.status_code == 200
        assert cleared.json()["role"] == "Model"

    def test_participant_of_other_shoot_is_404(self, client, auth_headers):
        a = _create_shoot(client, auth_headers, title="A")
        b = _create_shoot(client, auth_headers, title="B")
        created = client.post(f"/api/shoots/{a['id']}/participants", json={"name": "Ana", "role": "Model"}, headers=auth_headers)

        response = client.get(f"/api/shoots/{b['id']}/participants/{created.json()['id']}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "PARTICIPANT_NOT_FOUND"

    def test_reference_lifecycle(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)
        base = f"/api/shoots/{shoot['id']}/references"

        created = client.post(base, json={"type": "image", "url": "https://example.com/pose.png"}, headers=auth_headers)
        assert created.status_code == 201
        rid = created.json()["id"]

        assert client.patch(f"{base}/{rid}", json={"title": "Pose"}, headers=auth_headers).json()["title"] == "Pose"
        assert client.delete(f"{base}/{rid}", headers=auth_headers).status_code == 204

    def test_link_and_unlink_prop(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)
        prop = client.post("/api/props", json={"name": "Staff"}, headers=auth_headers).json()

        linked = client.post(f"/api/shoots/{shoot['id']}/props", json={"resourceId": prop["id"]}, headers=auth_headers)
        assert linked.status_code == 201

        listed = client.get(f"/api/shoots/{shoot['id']}/props", headers=auth_headers).json()
        assert [p["name"] for p in listed] == ["Staff"]

        removed = client.delete(f"/api/shoots/{shoot['id']}/props/{prop['id']}", headers=auth_headers)
        assert removed.status_code == 204

    def test_replace_resources(self, client, auth_headers):
        shoot = _create_shoot(client, auth_headers)
        person = client.post("/api/personnel", json={"name": "Ben"}, headers=auth_headers).json()

        response = client.patch(
            f"/api/shoots/{shoot['id']}/resources",
            json={"personnelIds": [person["id"]]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["participants"] == 1


# =============================================================================
# Resources
# =============================================================================

class TestResourceRoutes:
    def test_patch_equipment_null_required_columns_is_400(self, client, auth_headers, fake_db):
        created = client.post("/api/equipment", json={"name": "Softbox", "category": "Lighting"}, headers=auth_headers)
        equipment = created.json()

        response = client.patch(
            f"/api/equipment/{equipment['id']}",
            json={"name": None, "quantity": None, "available": None},
            headers=auth_headers,
        )

        assert response.status_code == 400
        stored = fake_db.rows("equipment", id=equipment["id"])[0]
        assert (stored["name"], stored["quantity"], stored["available"]) == ("Softbox", 1, True)

    def test_crud_costume(self, client, auth_headers):
        created = client.post("/api/costumes", json={"characterName": "Frieren", "seriesName": "Frieren"}, headers=auth_headers)
        assert created.status_code == 201
        costume = created.json()
        assert costume["characterName"] == "Frieren"

        patched = client.patch(f"/api/costumes/{costume['id']}", json={"status": "in-progress"}, headers=auth_headers)
        assert patched.json()["status"] == "in-progress"

        assert client.delete(f"/api/costumes/{costume['id']}", headers=auth_headers).status_code == 204
        missing = client.get(f"/api/costumes/{costume['id']}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["code"] == "COSTUME_NOT_FOUND"

    def test_equipment_requires_category(self, client, auth_headers):
        response = client.post("/api/equipment", json={"name": "AD200"}, headers=auth_headers)
        assert response.status_code == 400


# =============================================================================
# Team & user
# =============================================================================

class TestTeamRoutes:
    def test_active_team_created_on_first_use(self, client, auth_headers):
        team = client.get("/api/team", headers=auth_headers).json()

        assert team["name"] == "My Team"
        assert team["role"] == "owner"

    def test_create_team_switches_active(self, client, auth_headers):
        created = client.post("/api/team", json={"name": "Night Crew"}, headers=auth_headers)
        assert created.status_code == 201

        assert client.get("/api/team", headers=auth_headers).json()["name"] == "Night Crew"
        teams = client.get("/api/user/teams", headers=auth_headers).json()
        assert {t["name"]: t["isActive"] for t in teams} == {"Night Crew": True}

    def test_member_cannot_rename(self, client, auth_headers, user_id, fake_db):
        team = fake_db.add("teams", {"name": "Theirs"})
        fake_db.add("team_members", {"team_id": team["id"], "user_id": user_id, "role": "member"})
        fake_db.add("user_profiles", {"user_id": user_id, "active_team_id": team["id"]})

        response = client.patch("/api/team", json={"name": "Mine"}, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "INSUFFICIENT_ROLE"

    def test_profile_created_from_token(self, client, auth_headers):
        profile = client.get("/api/user/profile", headers=auth_headers).json()
        assert profile["firstName"] == "Ana"

        updated = client.patch("/api/user/profile", json={"lastName": "Lima"}, headers=auth_headers).json()
        assert updated["lastName"] == "Lima"
        assert updated["firstName"] == "Ana"


class TestRequestLogging:
    def test_line_format(self):
        assert format_request_line("GET", "/api/shoots", 200, 12.7) == "GET /api/shoots 200 in 12ms"

    def test_long_lines_truncated(self):
        line = format_request_line("GET", "/api/shoots/" + "x" * 200, 200, 1)
        assert len(line) == 80
        assert line.endswith("…")

    def test_api_requests_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.requests"):
            client.get("/api/health")
            client.get("/")

        lines = [r.getMessage() for r in caplog.records if r.name == "app.requests"]
        assert len(lines) == 1
        assert lines[0].startswith("GET /api/health 200 in ")
