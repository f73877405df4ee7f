"""Tests for /api/projects — routes wired to a ProjectStore on in-memory SQLite."""

from unittest.mock import MagicMock

from api.deps import get_project_store
from api.main import app
from api.routes.projects import STORE_UNAVAILABLE
from core.mixing.types import Message
from core.projects import Project
from db.projects import ProjectStore, ProjectStoreError

BODY = {
    "name": "Chorus vocals",
    "messages": [
        {"role": "user", "content": "too sibilant"},
        {"role": "assistant", "content": "de-ess at 6 kHz"},
    ],
    "mode": "vocals",
    "presetId": "deathcore",
    "tone": {"aggression": "high", "tightness": "medium", "brightness": "dark"},
    "mixFileName": "chorus.wav",
}


class TestProjectRoutes:
    def test_put_then_list(self, api_client) -> None:
        resp = api_client.put("/api/projects/abc", json=BODY)
        assert resp.status_code == 200
        stored = resp.json()
        assert stored["id"] == "abc"
        assert stored["presetId"] == "deathcore"
        assert stored["mixFileName"] == "chorus.wav"
        assert stored["tone"] == BODY["tone"]
        assert stored["created_at"] is not None

        listing = api_client.get("/api/projects").json()
        assert listing["total"] == 1
        assert listing["projects"][0]["messages"] == BODY["messages"]

    def test_put_replaces_every_field(self, api_client) -> None:
        api_client.put("/api/projects/abc", json=BODY)
        resp = api_client.put("/api/projects/abc", json={"name": "Only a name"})
        stored = resp.json()
        assert stored["name"] == "Only a name"
        assert stored["messages"] is None
        assert stored["tone"] is None
        assert stored["presetId"] is None

    def test_delete(self, api_client) -> None:
        api_client.put("/api/projects/abc", json=BODY)
        resp = api_client.delete("/api/projects/abc")
        assert resp.status_code == 204
        assert api_client.get("/api/projects").json() == {"projects": [], "total": 0}

    def test_long_file_name_and_name_saved(self, api_client) -> None:
        file_name = "f" * 300 + ".wav"
        resp = api_client.put(
            "/api/projects/c", json={"name": "n" * 500, "mode": "m" * 40, "mixFileName": file_name}
        )
        assert resp.status_code == 200
        assert resp.json()["mixFileName"] == file_name

    def test_long_stored_message_lists(self, api_client) -> None:
        content = "a" * 20_001
        api_client.store.upsert_project(
            Project(id="long", messages=(Message(role="assistant", content=content),))
        )
        resp = api_client.get("/api/projects")
        assert resp.status_code == 200
        assert resp.json()["projects"][0]["messages"] == [
            {"role": "assistant", "content": content}
        ]

    def test_invalid_tone_is_422(self, api_client) -> None:
        resp = api_client.put("/api/projects/abc", json={"tone": {"brightness": "neon"}})
        assert resp.status_code == 422


class TestStoreUnavailable:
    def _override_broken_store(self) -> MagicMock:
        store = MagicMock(spec=ProjectStore)
        store.load_projects.side_effect = ProjectStoreError("connection refused")
        store.upsert_project.side_effect = ProjectStoreError("connection refused")
        store.delete_project.side_effect = ProjectStoreError("connection refused")
        app.dependency_overrides[get_project_store] = lambda: store
        return store

    def test_list_failure_is_503(self, api_client) -> None:
        self._override_broken_store()
        resp = api_client.get("/api/projects")
        assert resp.status_code == 503
        assert resp.json() == {"detail": STORE_UNAVAILABLE}

    def test_upsert_failure_is_503(self, api_client) -> None:
        self._override_broken_store()
        assert api_client.put("/api/projects/abc", json=BODY).status_code == 503

    def test_delete_failure_hides_raw_error(self, api_client) -> None:
        self._override_broken_store()
        resp = api_client.delete("/api/projects/abc")
        assert resp.status_code == 503
        assert "connection refused" not in resp.text
