"""Pydantic schemas for campus events and browsing filters."""
from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _split_tags(value):
    """Accept a list of tags or the comma-separated form typed into the creation form."""
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return value


class Event(BaseModel):
    """A stored campus event."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Repository-assigned event ID", examples=["3f2b9c0e1d4a4c6b"])
    title: str = Field(description="Event title", examples=["AI Workshop"])
    description: str = Field(default="", description="Event description")
    date: dt.date | None = Field(default=None, description="Event date (ISO 8601)")
    time: dt.time | None = Field(default=None, description="Start time (HH:MM)")
    location: str = Field(default="", description="Venue")
    department: str = Field(default="", examples=["Computer Science"])
    club: str = Field(default="", description="Organizing club", examples=["ACM Student Chapter"])
    tags: list[str] = Field(default=[], examples=[["technology", "AI"]])
    attendees: int = Field(default=0, ge=0, description="Current attendee count")
    max_attendees: int | None = Field(
        default=None, alias="maxAttendees", description="Capacity (1-10,000)"
    )
    created_at: dt.datetime | None = Field(default=None, alias="createdAt")
    updated_at: dt.datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, v):
        return [] if v is None else v

    @field_validator("attendees", mode="before")
    @classmethod
    def _default_attendees(cls, v):
        return 0 if v is None else v


class EventCreate(BaseModel):
    """Request body for creating an event."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: str = ""
    date: dt.date | None = None
    time: dt.time | None = None
    location: str = ""
    department: str = ""
    club: str = ""
    tags: list[str] = Field(
        default=[],
        description="Tag list, or a comma-separated string",
        examples=[["Workshop", "technology"]],
    )
    attendees: int = 0
    max_attendees: int | None = Field(default=None, alias="maxAttendees")

    @field_validator("tags", mode="before")
    @classmethod
    def _split(cls, v):
        return _split_tags(v)


class EventUpdate(BaseModel):
    """Partial update. Only fields that are set are written."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = None
    department: str | None = None
    club: str | None = None
    tags: list[str] | None = None
    attendees: int | None = None
    max_attendees: int | None = Field(default=None, alias="maxAttendees")

    @field_validator("tags", mode="before")
    @classmethod
    def _split(cls, v):
        return None if v is None else _split_tags(v)


class FilterCriteria(BaseModel):
    """Browsing filters. Empty values do not constrain."""

    search_term: str = ""
    department: str = ""
    date: dt.date | None = None
    types: list[str] = []

    @classmethod
    def from_query(
        cls,
        q: str | None = None,
        department: str | None = None,
        date: dt.date | None = None,
        types: str | None = None,
    ) -> FilterCriteria:
        """Build criteria from query-string values (``types`` comma-separated)."""
        return cls(
            search_term=q or "",
            department=(department or "").strip(),
            date=date,
            types=[t.strip() for t in (types or "").split(",") if t.strip()],
        )


class EventOptions(BaseModel):
    """Choices offered by the filter panel and the creation form."""

    departments: list[str]
    types: list[str]
