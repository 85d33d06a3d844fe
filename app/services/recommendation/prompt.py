"""Prompt construction for event recommendations."""
from __future__ import annotations

import json
from collections.abc import Sequence

from app.schemas.event import Event

# Fields the model needs to judge relevance
PROMPT_EVENT_FIELDS = {
    "id", "title", "description", "date", "time", "location", "department", "club", "tags",
}

RECOMMENDATION_PROMPT = """\
You are an AI that recommends college events to students based on their interests.

Student Interests: {interests}

Event List:
{events}

Return {count} events that best match the interests with a reason for each.
Respond with a JSON array only, no other text, in exactly this format:
[
  {{
    "title": "...",
    "reason": "...",
    "date": "...",
    "department": "...",
    "club": "...",
    "tags": ["..."],
    "score": 85
  }}
]

Copy title, date, department, club and tags from the event list.
Make sure the score is an integer between 0-100 representing how well the event matches the student's interests.
"""


def serialize_events(events: Sequence[Event]) -> str:
    """Render the event corpus as stable, indented JSON."""
    rows = [e.model_dump(mode="json", include=PROMPT_EVENT_FIELDS) for e in events]
    return json.dumps(rows, indent=2, sort_keys=True, ensure_ascii=False)


def build_prompt(interests: str, events: Sequence[Event], count: int = 3) -> str:
    return RECOMMENDATION_PROMPT.format(
        interests=interests,
        events=serialize_events(events),
        count=count,
    )
