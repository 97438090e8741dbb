"""
backend/test_projects_api.py

HTTP tests for /api/projects.

Tests cover:
- Envelopes and status codes for GET/POST/PUT/DELETE/OPTIONS
- Error mapping (400/404/405/500) with {"error": ...} bodies
- Permissive CORS headers on every response, including errors
- Read-after-write consistency across requests

Run: pytest backend/test_projects_api.py -v
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import backend.project_store as project_store_module
from backend.main import app
from backend.project_store import ProjectStore, parse_timestamp


OAK_TOWER = {"name": "Oak Tower", "address": "1 Main", "city": "Austin", "assetType": "Retail"}


# ========================================================================
# FIXTURES
# ========================================================================

@pytest.fixture
def store(tmp_path: Path) -> ProjectStore:
    """Fresh store in a temp directory for each test."""
    return ProjectStore(tmp_path / "data" / "projects.json")


@pytest.fixture
def client(store: ProjectStore, monkeypatch):
    """FastAPI test client wired to the temp store."""
    monkeypatch.setattr(project_store_module, "_store", store)
    return TestClient(app)


def assert_cors(resp) -> None:
    assert resp.headers.get("access-control-allow-origin") == "*"
    for method in ["GET", "POST", "PUT", "DELETE", "OPTIONS"]:
        assert method in resp.headers.get("access-control-allow-methods", "")


# ========================================================================
# SCENARIOS
# ========================================================================

class TestCreateAndList:
    """POST then GET round trip."""

    def test_list_empty(self, client):
        resp = client.get("/api/projects")
        assert resp.status_code == 200
        assert resp.json() == {"projects": []}
        assert_cors(resp)

    def test_create_then_get(self, client):
        resp = client.post("/api/projects", json=OAK_TOWER)
        assert resp.status_code == 201, resp.text
        created = resp.json()["project"]
        assert created["id"]
        assert created["createdAt"] == created["updatedAt"]

        resp = client.get("/api/projects")
        projects = resp.json()["projects"]
        assert len(projects) == 1
        assert projects[0]["id"] == created["id"]
        for key, value in OAK_TOWER.items():
            assert projects[0][key] == value

    def test_create_missing_required_fields(self, client):
        resp = client.post("/api/projects", json={"name": "Oak Tower"})
        assert resp.status_code == 400
        assert "address" in resp.json()["error"]
        assert "city" in resp.json()["error"]
        assert_cors(resp)

        assert client.get("/api/projects").json() == {"projects": []}

    def test_create_invalid_asset_type_is_400(self, client):
        resp = client.post("/api/projects", json={**OAK_TOWER, "assetType": "Castle"})
        assert resp.status_code == 400
        assert "assetType" in resp.json()["error"]

    def test_create_malformed_json_is_400(self, client):
        resp = client.post(
            "/api/projects",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_create_trims_text_fields(self, client):
        resp = client.post("/api/projects", json={**OAK_TOWER, "name": "  Oak Tower  "})
        assert resp.json()["project"]["name"] == "Oak Tower"


class TestUpdate:
    """PUT with id query parameter."""

    def test_update_city(self, client):
        created = client.post("/api/projects", json=OAK_TOWER).json()["project"]

        resp = client.put(f"/api/projects?id={created['id']}", json={"city": "Dallas"})
        assert resp.status_code == 200, resp.text
        updated = resp.json()["project"]

        assert updated["city"] == "Dallas"
        assert updated["address"] == "1 Main"
        assert updated["createdAt"] == created["createdAt"]
        assert parse_timestamp(updated["updatedAt"]) > parse_timestamp(updated["createdAt"])

    def test_update_full_draft_from_edit_form(self, client):
        """The edit form sends the whole record back, including id/createdAt/updatedAt."""
        created = client.post("/api/projects", json=OAK_TOWER).json()["project"]
        draft = {**created, "createdAt": "1999-01-01T00:00:00.000Z", "model": "CREFC"}

        updated = client.put("/api/projects", params={"id": created["id"]}, json=draft).json()["project"]

        assert updated["model"] == "CREFC"
        assert updated["createdAt"] == created["createdAt"]

    def test_update_requires_id(self, client):
        resp = client.put("/api/projects", json={"city": "Dallas"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Project ID is required"}

    def test_update_unknown_id(self, client):
        resp = client.put("/api/projects?id=nope", json={"city": "Dallas"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Project not found"}
        assert_cors(resp)


class TestDelete:
    """DELETE with id query parameter."""

    def test_delete(self, client):
        created = client.post("/api/projects", json=OAK_TOWER).json()["project"]

        resp = client.delete(f"/api/projects?id={created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        ids = [p["id"] for p in client.get("/api/projects").json()["projects"]]
        assert created["id"] not in ids

    def test_delete_requires_id(self, client):
        resp = client.delete("/api/projects")
        assert resp.status_code == 400

    def test_delete_unknown_id(self, client):
        client.post("/api/projects", json=OAK_TOWER)

        resp = client.delete("/api/projects?id=nope")
        assert resp.status_code == 404
        assert len(client.get("/api/projects").json()["projects"]) == 1


class TestProtocol:
    """OPTIONS, 405 and storage failures."""

    def test_options_is_empty_200(self, client):
        resp = client.options("/api/projects")
        assert resp.status_code == 200
        assert resp.content == b""
        assert_cors(resp)

    def test_preflight_allows_any_origin(self, client):
        resp = client.options(
            "/api/projects",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "PUT",
            },
        )
        assert resp.status_code == 200
        assert resp.headers.get("access-control-allow-origin") == "*"

    def test_unsupported_method_is_405(self, client):
        resp = client.patch("/api/projects", json={"city": "Dallas"})
        assert resp.status_code == 405
        assert resp.headers["allow"] == "GET, POST, PUT, DELETE"
        assert resp.json() == {"error": "Method PATCH Not Allowed"}
        assert_cors(resp)

    def test_storage_failure_is_500_without_details(self, client, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")

        resp = client.get("/api/projects")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Storage error"}
        assert str(store.path) not in resp.text

    def test_non_object_entries_are_500_with_envelope(self, client, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("[1]", encoding="utf-8")

        resp = client.delete("/api/projects?id=x")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Storage error"}
        assert_cors(resp)

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
