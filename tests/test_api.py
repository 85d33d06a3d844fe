"""HTTP tests for the events, recommendations and health routes."""
import datetime as dt
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_repository
from app.config import settings
from app.main import app
from app.services.errors import OracleTransportError

FUTURE = (dt.date.today() + dt.timedelta(days=10)).isoformat()

NEW_EVENT = {
    "title": "AI Workshop",
    "description": "Hands-on ML",
    "date": FUTURE,
    "time": "17:00",
    "location": "Hall 101",
    "department": "Computer Science",
    "club": "ACM",
    "tags": "Workshop, technology",
    "maxAttendees": 40,
}


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(fake_supabase):
    fake_supabase.tables["events"] = [
        {"id": "1", "title": "AI Workshop", "club": "ACM", "tags": ["technology", "AI"],
         "department": "Computer Science", "date": "2025-03-01"},
        {"id": "2", "title": "Soccer Match", "club": "Intramurals", "tags": ["Sports"],
         "department": "Student Life", "date": "2025-03-02"},
    ]
    return fake_supabase


def test_create_event(client):
    resp = client.post("/api/v1/events/", json=NEW_EVENT)

    assert resp.status_code == 201
    body = resp.json()
    assert body["id"]
    assert body["tags"] == ["Workshop", "technology"]
    assert body["attendees"] == 0
    assert body["maxAttendees"] == 40
    assert body["createdAt"] == body["updatedAt"]


def test_create_event_validation_errors(client, fake_supabase):
    resp = client.post(
        "/api/v1/events/", json={**NEW_EVENT, "title": "", "maxAttendees": 20000}
    )

    assert resp.status_code == 422
    errors = resp.json()["detail"]["errors"]
    assert errors == {
        "title": "Event title is required",
        "maxAttendees": "Max attendees must be between 1 and 10,000",
    }
    assert fake_supabase.tables.get("events", []) == []


def test_create_event_store_failure(client, fake_supabase):
    fake_supabase.error = ConnectionError("boom")
    resp = client.post("/api/v1/events/", json=NEW_EVENT)
    assert resp.status_code == 502


def test_list_events_unfiltered(client, seeded):
    resp = client.get("/api/v1/events/")
    assert resp.status_code == 200
    assert [e["title"] for e in resp.json()] == ["AI Workshop", "Soccer Match"]


@pytest.mark.parametrize("params, expected", [
    ({"types": "technology"}, ["AI Workshop"]),
    ({"types": "Sports,technology"}, ["AI Workshop", "Soccer Match"]),
    ({"q": "intra"}, ["Soccer Match"]),
    ({"department": "Computer Science"}, ["AI Workshop"]),
    ({"date": "2025-03-02"}, ["Soccer Match"]),
    ({"q": "acm", "types": "Sports"}, []),
])
def test_list_events_filtered(client, seeded, params, expected):
    resp = client.get("/api/v1/events/", params=params)
    assert [e["title"] for e in resp.json()] == expected


def test_event_options(client):
    body = client.get("/api/v1/events/options").json()
    assert "Computer Science" in body["departments"]
    assert "Workshop" in body["types"]


def test_get_event(client, seeded):
    assert client.get("/api/v1/events/1").json()["title"] == "AI Workshop"
    resp = client.get("/api/v1/events/missing")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Event not found"}


def test_patch_event(client):
    created = client.post("/api/v1/events/", json=NEW_EVENT).json()

    resp = client.patch(f"/api/v1/events/{created['id']}", json={"title": "ML Workshop"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "ML Workshop"
    assert body["createdAt"] == created["createdAt"]
    assert body["updatedAt"] >= created["updatedAt"]


def test_patch_event_invalid_and_missing(client):
    created = client.post("/api/v1/events/", json=NEW_EVENT).json()
    assert client.patch(f"/api/v1/events/{created['id']}", json={"location": ""}).status_code == 422
    assert client.patch("/api/v1/events/missing", json={"title": "X"}).status_code == 404


def test_delete_event(client, seeded):
    assert client.delete("/api/v1/events/1").status_code == 204
    assert client.get("/api/v1/events/1").status_code == 404
    assert client.delete("/api/v1/events/1").status_code == 404


def test_recommendations(client, seeded):
    payload = [{
        "title": "AI Workshop", "reason": "You like AI", "date": "2025-03-01",
        "department": "Computer Science", "club": "ACM", "tags": ["technology", "AI"],
        "score": 93,
    }]
    with patch(
        "app.services.recommendation.llm.call_llm_json",
        new=AsyncMock(return_value=payload),
    ):
        resp = client.post("/api/v1/recommendations/", json={"interests": "AI and ML"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 1
    assert body["failed"] is False
    item = body["items"][0]
    assert item["title"] == "AI Workshop"
    assert item["score"] == 93
    assert item["event_id"] == "1"
    assert item["match_level"] == "excellent"


def test_recommendations_oracle_failure_is_not_an_http_error(client, seeded):
    with patch(
        "app.services.recommendation.llm.call_llm_json",
        new=AsyncMock(side_effect=OracleTransportError("HTTP 500")),
    ):
        resp = client.post("/api/v1/recommendations/", json={"interests": "AI"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["failed"] is True
    assert body["error"]


def test_recommendations_blank_interests(client, fake_supabase):
    oracle = AsyncMock()
    with patch("app.services.recommendation.llm.call_llm_json", new=oracle):
        resp = client.post("/api/v1/recommendations/", json={"interests": "   "})

    assert resp.json()["items"] == []
    oracle.assert_not_awaited()
    assert fake_supabase.calls == []


def test_recommendations_store_failure(client, fake_supabase):
    fake_supabase.error = ConnectionError("down")
    resp = client.post("/api/v1/recommendations/", json={"interests": "AI"})
    assert resp.status_code == 502


def test_health_not_configured(client):
    with patch.object(settings, "SUPABASE_URL", ""), patch.object(settings, "GEMINI_API_KEY", ""):
        body = client.get("/api/v1/health/").json()
    assert body["status"] == "ok"
    assert body["event_store"] == "not_configured"
    assert body["oracle"] == "not_configured"


def test_health_connected(client):
    with patch.object(settings, "SUPABASE_URL", "https://x.supabase.co"), \
            patch.object(settings, "SUPABASE_KEY", "k"):
        body = client.get("/api/v1/health/").json()
    assert body["event_store"] == "connected"


def test_oracle_call_log(client, tracker):
    tracker.log_call(model="m", prompt="p", response_text="", success=False,
                     error_message="bad", raw_payload="not json")
    with patch("app.api.v1.health.get_tracker", return_value=tracker):
        body = client.get("/api/v1/health/oracle", params={"failed_only": True}).json()
    assert body["summary"]["total_errors"] == 1
    assert body["calls"][0]["raw_payload"] == "not json"
