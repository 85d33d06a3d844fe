import datetime as dt
from unittest.mock import patch

import pytest

from app.schemas.event import Event
from app.schemas.recommendation import Recommendation
from app.services.event_repository import SupabaseEventRepository
from app.services.llm_call_tracker import LLMCallTracker


class FakeResult:
    def __init__(self, data):
        self.data = data
        self.count = len(data)


class FakeQuery:
    """Just enough of the supabase-py query builder for the event repository."""

    def __init__(self, db, table):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload = None
        self._filters = []
        self._limit = None

    def select(self, *columns, **kwargs):
        self._op = "select"
        return self

    def insert(self, row):
        self._op, self._payload = "insert", row
        return self

    def update(self, changes):
        self._op, self._payload = "update", changes
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def execute(self):
        if self._db.error is not None:
            raise self._db.error
        self._db.calls.append(self._op)
        rows = self._db.tables.setdefault(self._table, [])
        matched = [r for r in rows if all(r.get(c) == v for c, v in self._filters)]

        if self._op == "insert":
            rows.append(dict(self._payload))
            return FakeResult([dict(self._payload)])
        if self._op == "update":
            for r in matched:
                r.update(self._payload)
            return FakeResult([dict(r) for r in matched])
        if self._op == "delete":
            for r in matched:
                rows.remove(r)
            return FakeResult([dict(r) for r in matched])
        if self._limit is not None:
            matched = matched[:self._limit]
        return FakeResult([dict(r) for r in matched])


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[str] = []
        self.error: Exception | None = None

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def repository(fake_supabase):
    return SupabaseEventRepository(client=fake_supabase, table="events")


@pytest.fixture(autouse=True)
def tracker(tmp_path):
    """Keep oracle call logs out of the project data directory."""
    t = LLMCallTracker(logs_dir=tmp_path / "logs")
    with patch("app.services.llm_service.get_tracker", return_value=t):
        yield t


def make_event(**overrides) -> Event:
    data = {
        "id": "evt1",
        "title": "AI Workshop",
        "description": "Intro to machine learning",
        "date": dt.date(2025, 3, 1),
        "time": dt.time(17, 0),
        "location": "Hall 101",
        "department": "Computer Science",
        "club": "ACM",
        "tags": ["technology", "AI"],
    }
    data.update(overrides)
    return Event.model_validate(data)


def make_recommendation(**overrides) -> Recommendation:
    data = {
        "title": "AI Workshop",
        "reason": "Matches your interest in AI",
        "date": "2025-03-01",
        "department": "Computer Science",
        "club": "ACM",
        "tags": ["technology", "AI"],
        "score": 92,
    }
    data.update(overrides)
    return Recommendation.model_validate(data)
