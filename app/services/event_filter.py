"""Local event browsing filter."""
from __future__ import annotations

from collections.abc import Sequence

from app.schemas.event import Event, FilterCriteria


def _matches_search(event: Event, term: str) -> bool:
    if not term:
        return True
    return (
        term in event.title.lower()
        or term in event.club.lower()
        or any(term in tag.lower() for tag in event.tags)
    )


def _matches_types(event: Event, types: list[str]) -> bool:
    if not types:
        return True
    tags = {tag.lower() for tag in event.tags}
    return any(t.lower() in tags for t in types)


def filter_events(events: Sequence[Event], criteria: FilterCriteria) -> list[Event]:
    """Return the events matching every set criterion, in input order.

    Search is a case-insensitive substring match on title, club or any tag.
    Department and date must match exactly. Types match when any selected
    type equals (case-insensitively) any tag on the event.
    """
    term = criteria.search_term.strip().lower()
    department = criteria.department
    types = [t.strip() for t in criteria.types if t.strip()]

    return [
        e for e in events
        if _matches_search(e, term)
        and (not department or e.department == department)
        and (criteria.date is None or e.date == criteria.date)
        and _matches_types(e, types)
    ]
