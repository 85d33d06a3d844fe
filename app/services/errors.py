"""Exceptions shared by the event and recommendation services."""
from __future__ import annotations

from typing import Any


class EventValidationError(Exception):
    """Raised when event fields fail validation. Nothing has been written."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class RepositoryError(Exception):
    """Raised when the event store call fails."""


class EventNotFoundError(RepositoryError):
    """Raised when an update targets an event id that does not exist."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class OracleError(Exception):
    """Base class for recommendation oracle failures."""


class OracleTransportError(OracleError):
    """Network, HTTP status or credential failure calling the oracle."""


class OracleContractError(OracleError):
    """The oracle answered, but not in the agreed format."""

    def __init__(self, message: str, raw: Any = None):
        self.raw = raw
        super().__init__(message)
