"""Recommendation pipeline: interests plus the event corpus in, scored suggestions out."""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from app.schemas.event import Event
from app.schemas.recommendation import Recommendation
from app.services.errors import OracleError, OracleTransportError
from app.services.event_repository import SupabaseEventRepository
from app.services.recommendation.llm import fetch_recommendations, log_oracle_failure

logger = logging.getLogger(__name__)

Oracle = Callable[[str, Sequence[Event]], Awaitable[list[Recommendation]]]

TRANSPORT_FAILURE_MESSAGE = "Recommendation service is unavailable, please try again"
CONTRACT_FAILURE_MESSAGE = "Recommendation service returned an unexpected response"


@dataclass
class RecommendationOutcome:
    interests: str
    recommendations: list[Recommendation] = field(default_factory=list)
    failed: bool = False
    error: str | None = None


def link_events(
    recommendations: list[Recommendation], events: Sequence[Event],
) -> list[Recommendation]:
    """Attach the id of the stored event whose title matches each recommendation."""
    ids_by_title: dict[str, str] = {}
    for event in events:
        ids_by_title.setdefault(event.title.strip().lower(), event.id)

    return [
        rec.model_copy(update={"event_id": ids_by_title.get(rec.title.strip().lower())})
        for rec in recommendations
    ]


class RecommendationPipeline:
    """Runs one recommendation request end to end.

    Repository failures propagate. Oracle failures never do: they come back
    as an empty, ``failed`` outcome and are logged.
    """

    def __init__(
        self,
        repository: SupabaseEventRepository,
        oracle: Oracle | None = None,
    ):
        self.repository = repository
        self.oracle = oracle or fetch_recommendations

    async def run(self, interests: str) -> RecommendationOutcome:
        interests = (interests or "").strip()
        if not interests:
            return RecommendationOutcome(interests="")

        events = await self.repository.get_events()
        logger.info(
            "Requesting recommendations for %r over %d events", interests, len(events)
        )

        try:
            recommendations = await self.oracle(interests, events)
        except OracleTransportError as e:
            log_oracle_failure(e)
            return RecommendationOutcome(
                interests, failed=True, error=TRANSPORT_FAILURE_MESSAGE
            )
        except OracleError as e:
            log_oracle_failure(e)
            return RecommendationOutcome(
                interests, failed=True, error=CONTRACT_FAILURE_MESSAGE
            )
        except Exception as e:
            logger.warning("Unexpected error from recommendation oracle: %s", e)
            return RecommendationOutcome(
                interests, failed=True, error=CONTRACT_FAILURE_MESSAGE
            )

        return RecommendationOutcome(interests, link_events(recommendations, events))

    async def request_recommendations(self, interests: str) -> list[Recommendation]:
        outcome = await self.run(interests)
        return outcome.recommendations


class RecommendationSession:
    """Caller-owned "current recommendations" state.

    Every submit gets a sequence number; only the response to the most recent
    submit is applied, so a slow earlier request can't overwrite a newer one.
    """

    def __init__(self, pipeline: RecommendationPipeline):
        self.pipeline = pipeline
        self.interests = ""
        self.recommendations: list[Recommendation] = []
        self.error: str | None = None
        self.is_loading = False
        self._seq = 0

    @property
    def latest_request(self) -> int:
        return self._seq

    async def submit(self, interests: str) -> RecommendationOutcome | None:
        """Run a request and apply it if still current.

        Returns the applied outcome, or None when the input was blank or the
        response was superseded.
        """
        if not (interests or "").strip():
            return None

        self._seq += 1
        seq = self._seq
        self.is_loading = True
        try:
            outcome = await self.pipeline.run(interests)
        except Exception as e:
            if seq == self._seq:
                self.is_loading = False
                self.recommendations = []
                self.error = str(e)
            raise

        if seq != self._seq:
            logger.debug(
                "Discarding stale recommendation response #%d (latest #%d)", seq, self._seq
            )
            return None

        self.is_loading = False
        self.interests = outcome.interests
        self.recommendations = outcome.recommendations
        self.error = outcome.error
        return outcome

    def reset(self) -> None:
        """Clear state; responses still in flight will be discarded."""
        self._seq += 1
        self.interests = ""
        self.recommendations = []
        self.error = None
        self.is_loading = False
