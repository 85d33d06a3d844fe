"""Business logic for campus events: validation, creation, updates and browsing."""
from __future__ import annotations

import logging
from datetime import date

from app.config import settings
from app.schemas.event import Event, EventCreate, EventUpdate, FilterCriteria
from app.services.errors import EventNotFoundError, EventValidationError
from app.services.event_filter import filter_events
from app.services.event_repository import SupabaseEventRepository

logger = logging.getLogger(__name__)

DEPARTMENTS = [
    "Computer Science",
    "Engineering",
    "Business",
    "Arts & Sciences",
    "Student Life",
    "Sports & Recreation",
    "Medicine",
    "Law",
    "Education",
]

EVENT_TYPES = ["Workshop", "Seminar", "Social", "Competition", "technology", "Sports"]

# field -> message when the value is missing or blank
_REQUIRED_TEXT = {
    "title": "Event title is required",
    "description": "Description is required",
    "location": "Location is required",
    "department": "Department is required",
    "club": "Club/Organization is required",
}


def _check_date(value: date | None, today: date, errors: dict[str, str]) -> None:
    if value is None:
        errors["date"] = "Date is required"
    elif value < today:
        errors["date"] = "Event date cannot be in the past"


def _check_capacity(value: int | None, errors: dict[str, str]) -> None:
    limit = settings.MAX_ATTENDEES_LIMIT
    if value is not None and not 1 <= value <= limit:
        errors["maxAttendees"] = f"Max attendees must be between 1 and {limit:,}"


def validate_event(fields: EventCreate, today: date | None = None) -> None:
    """Raise EventValidationError with a message per invalid field."""
    today = today or date.today()
    errors: dict[str, str] = {}

    for name, message in _REQUIRED_TEXT.items():
        if not getattr(fields, name).strip():
            errors[name] = message
    _check_date(fields.date, today, errors)
    if fields.time is None:
        errors["time"] = "Time is required"
    _check_capacity(fields.max_attendees, errors)
    if fields.attendees < 0:
        errors["attendees"] = "Attendees cannot be negative"

    if errors:
        raise EventValidationError(errors)


def validate_update(fields: EventUpdate, today: date | None = None) -> None:
    """Like validate_event, but only for the fields present in the update."""
    today = today or date.today()
    supplied = fields.model_fields_set
    errors: dict[str, str] = {}

    for name, message in _REQUIRED_TEXT.items():
        if name in supplied and not (getattr(fields, name) or "").strip():
            errors[name] = message
    if "date" in supplied:
        _check_date(fields.date, today, errors)
    if "time" in supplied and fields.time is None:
        errors["time"] = "Time is required"
    if "max_attendees" in supplied:
        _check_capacity(fields.max_attendees, errors)
    if "attendees" in supplied and (fields.attendees is None or fields.attendees < 0):
        errors["attendees"] = "Attendees cannot be negative"

    if errors:
        raise EventValidationError(errors)


async def create_event(repository: SupabaseEventRepository, fields: EventCreate) -> Event:
    validate_event(fields)
    return await repository.add_event(fields)


async def update_event(
    repository: SupabaseEventRepository, event_id: str, fields: EventUpdate,
) -> Event:
    """Validate and apply a partial update, returning the refreshed event."""
    validate_update(fields)
    await repository.update_event(event_id, fields)
    event = await repository.get_event_by_id(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


async def list_events(
    repository: SupabaseEventRepository, criteria: FilterCriteria | None = None,
) -> list[Event]:
    events = await repository.get_events()
    if criteria is None:
        return events
    return filter_events(events, criteria)
