"""Tests for document event and published-span endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from app.core.state import get_rebuild_coordinator
from app.main import app
from pipeline.attribution.emitter import DecorationSpan
from pipeline.rebuild import EditorUpdate, RebuildCoordinator


def _override(coordinator: MagicMock) -> None:
    app.dependency_overrides[get_rebuild_coordinator] = lambda: coordinator


# ---------------------------------------------------------------------------
# POST /api/v1/documents/{document_id}/events
# ---------------------------------------------------------------------------


def test_doc_change_schedules_rebuild(client: TestClient) -> None:
    coordinator = MagicMock(spec=RebuildCoordinator)
    coordinator.handle_update.return_value = True
    _override(coordinator)

    response = client.post(
        "/api/v1/documents/notes/today.md/events", json={"doc_changed": True}
    )
    assert response.status_code == 200
    assert response.json() == {"scheduled": True}
    coordinator.handle_update.assert_called_once_with(
        EditorUpdate(
            document_id="notes/today.md", doc_changed=True, viewport_changed=False
        )
    )


def test_no_change_does_not_schedule(client: TestClient) -> None:
    coordinator = MagicMock(spec=RebuildCoordinator)
    coordinator.handle_update.return_value = False
    _override(coordinator)

    response = client.post("/api/v1/documents/today.md/events", json={})
    assert response.status_code == 200
    assert response.json() == {"scheduled": False}


# ---------------------------------------------------------------------------
# GET /api/v1/documents/{document_id}/attribution
# ---------------------------------------------------------------------------


def test_published_spans(client: TestClient) -> None:
    coordinator = MagicMock(spec=RebuildCoordinator)
    coordinator.published.return_value = [
        DecorationSpan(
            start=0,
            end=5,
            color="red",
            author="bean_machine",
            style="background-color: red; opacity: 0.5;",
        )
    ]
    _override(coordinator)

    response = client.get("/api/v1/documents/notes/today.md/attribution")
    assert response.status_code == 200

    data = response.json()
    assert data["document_id"] == "notes/today.md"
    assert data["spans"] == [
        {
            "start": 0,
            "end": 5,
            "color": "red",
            "author": "bean_machine",
            "style": "background-color: red; opacity: 0.5;",
        }
    ]
    coordinator.published.assert_called_once_with("notes/today.md")


def test_published_spans_default_empty(client: TestClient) -> None:
    """Without a sync backend nothing is ever published."""
    response = client.get("/api/v1/documents/untracked.md/attribution")
    assert response.status_code == 200
    assert response.json()["spans"] == []


def test_event_without_backend_publishes_nothing(client: TestClient) -> None:
    response = client.post(
        "/api/v1/documents/untracked.md/events", json={"viewport_changed": True}
    )
    assert response.status_code == 200
    assert response.json() == {"scheduled": True}


# ---------------------------------------------------------------------------
# DELETE /api/v1/documents/{document_id}
# ---------------------------------------------------------------------------


def test_close_document_discards_state(client: TestClient) -> None:
    coordinator = MagicMock(spec=RebuildCoordinator)
    _override(coordinator)

    response = client.delete("/api/v1/documents/notes/today.md")
    assert response.status_code == 204
    coordinator.discard.assert_awaited_once_with("notes/today.md")
