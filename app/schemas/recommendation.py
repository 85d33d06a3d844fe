"""Schemas for AI event recommendations. Never persisted."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field, field_validator


class Recommendation(BaseModel):
    """One scored suggestion returned by the oracle."""

    title: str = Field(description="Recommended event title", examples=["AI Workshop"])
    reason: str = Field(description="Why the event matches (model-generated, untrusted)")
    date: str = Field(examples=["2025-03-01"])
    department: str = Field(examples=["Computer Science"])
    club: str
    tags: list[str]
    score: int = Field(ge=0, le=100, description="Match confidence 0-100", examples=[92])
    event_id: str | None = Field(
        default=None, description="ID of the matching stored event, if any"
    )

    @field_validator("score", mode="before")
    @classmethod
    def _reject_bool_score(cls, v):
        if isinstance(v, bool):
            raise ValueError("score must be an integer, not a boolean")
        return v

    @computed_field
    @property
    def match_level(self) -> Literal["excellent", "good", "fair"]:
        if self.score >= 90:
            return "excellent"
        if self.score >= 80:
            return "good"
        return "fair"


class RecommendationRequest(BaseModel):
    interests: str = Field(
        description="Free-text description of the student's interests",
        examples=["I like AI and machine learning"],
    )


class RecommendationResponse(BaseModel):
    interests: str
    items: list[Recommendation]
    total: int
    failed: bool = Field(default=False, description="True when the oracle call failed")
    error: str | None = None
