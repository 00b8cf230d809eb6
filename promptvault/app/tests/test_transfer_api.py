import pytest
from fastapi.testclient import TestClient

from ..services import vault


def test_import_then_export(client: TestClient) -> None:
    payload = {
        "prompts": [
            {"id": "p-1", "title": "One", "content": "{{a}}", "createdAt": 1, "updatedAt": 1},
            {"id": "p-2", "title": "Two", "createdAt": 2, "updatedAt": 2},
        ],
        "folders": [{"id": "f-1", "name": "Work", "createdAt": 1}],
    }

    response = client.post("/api/import", json=payload)

    assert response.status_code == 200
    assert response.json() == {"success": True, "imported": {"prompts": 2, "folders": 1}}

    exported = client.get("/api/export").json()
    assert exported["version"] == 2
    assert isinstance(exported["exportedAt"], int)
    assert [prompt["id"] for prompt in exported["prompts"]] == ["p-2", "p-1"]
    assert [folder["id"] for folder in exported["folders"]] == ["f-1"]


def test_import_overwrites_existing_ids(client: TestClient) -> None:
    client.post("/api/prompts", json={"id": "p-1", "title": "Before"})

    client.post("/api/import", json={"prompts": [{"id": "p-1", "title": "After"}]})

    assert client.get("/api/prompts/p-1").json()["title"] == "After"


def test_import_requires_prompt_array(client: TestClient) -> None:
    response = client.post("/api/import", json={"prompts": "nope"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid data: prompts")


def test_import_is_all_or_nothing(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    original = vault.prompt_from_create

    def _explode_on_bad(payload, now):
        if payload.id == "bad":
            raise RuntimeError("row rejected")
        return original(payload, now)

    monkeypatch.setattr(vault, "prompt_from_create", _explode_on_bad)

    response = client.post(
        "/api/import",
        json={"prompts": [{"id": "good"}, {"id": "bad"}], "folders": [{"id": "f-1"}]},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to import data"}
    exported = client.get("/api/export").json()
    assert exported["prompts"] == []
    assert exported["folders"] == []


def test_health_reports_counts(client: TestClient) -> None:
    client.post("/api/prompts", json={})
    client.post("/api/prompts", json={})
    client.post("/api/folders", json={})

    health = client.get("/api/health").json()

    assert health["status"] == "healthy"
    assert health["promptCount"] == 2
    assert health["folderCount"] == 1
    assert isinstance(health["timestamp"], int)
