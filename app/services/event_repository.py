"""Event repository: CRUD over the Supabase ``events`` table."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from app.config import settings
from app.schemas.event import Event, EventCreate, EventUpdate
from app.services.errors import EventNotFoundError, RepositoryError
from app.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SupabaseEventRepository:
    """Each method is one independent call against the event table.

    The Supabase client is synchronous, so queries run in a worker thread
    to keep the event loop free.
    """

    def __init__(self, client: Any = None, table: str | None = None):
        self._client = client
        self.table = table or settings.EVENTS_TABLE

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase()
        return self._client

    async def _execute(self, action: str, build) -> list[dict[str, Any]]:
        try:
            query = build(self.client.table(self.table))
            result = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.error("Event store %s failed: %s", action, e)
            raise RepositoryError(f"{action} failed: {e}") from e
        return result.data or []

    # ── Create ─────────────────────────────────────────────────────────

    async def add_event(self, fields: EventCreate) -> Event:
        """Insert a new event. ID and timestamps are assigned here."""
        now = _utcnow().isoformat()
        row = fields.model_dump(mode="json", by_alias=True)
        row["id"] = uuid.uuid4().hex
        row["createdAt"] = now
        row["updatedAt"] = now

        data = await self._execute("insert", lambda t: t.insert(row))
        stored = data[0] if data else row
        logger.info("Added event %s (%s)", stored.get("id"), stored.get("title"))
        return Event.model_validate(stored)

    # ── Read ───────────────────────────────────────────────────────────

    async def get_events(self) -> list[Event]:
        """Return every stored event. Malformed rows are skipped."""
        rows = await self._execute("select", lambda t: t.select("*"))
        events: list[Event] = []
        for row in rows:
            try:
                events.append(Event.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed event row %s: %s", row.get("id"), e)
        return events

    async def get_event_by_id(self, event_id: str) -> Event | None:
        rows = await self._execute(
            "select", lambda t: t.select("*").eq("id", event_id).limit(1)
        )
        if not rows:
            return None
        return Event.model_validate(rows[0])

    # ── Update / delete ────────────────────────────────────────────────

    async def update_event(self, event_id: str, fields: EventUpdate) -> None:
        """Merge the supplied fields into the stored event and refresh ``updatedAt``."""
        changes = fields.model_dump(mode="json", by_alias=True, exclude_unset=True)
        changes.pop("id", None)
        changes.pop("createdAt", None)
        changes["updatedAt"] = _utcnow().isoformat()

        rows = await self._execute(
            "update", lambda t: t.update(changes).eq("id", event_id)
        )
        if not rows:
            raise EventNotFoundError(event_id)
        logger.info("Updated event %s: %s", event_id, sorted(changes))

    async def delete_event(self, event_id: str) -> None:
        await self._execute("delete", lambda t: t.delete().eq("id", event_id))
        logger.info("Deleted event %s", event_id)

    # ── Connectivity ───────────────────────────────────────────────────

    async def ping(self) -> bool:
        """Check that the event table is reachable."""
        try:
            await self._execute("ping", lambda t: t.select("id").limit(1))
        except RepositoryError as e:
            logger.warning("Event store ping failed: %s", e)
            return False
        return True
