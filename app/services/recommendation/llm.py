"""LLM recommendations: ask the oracle for events matching a student's interests."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from app.config import settings
from app.schemas.event import Event
from app.schemas.recommendation import Recommendation
from app.services.errors import OracleContractError, OracleError
from app.services.llm_service import call_llm_json
from app.services.recommendation.prompt import build_prompt

logger = logging.getLogger(__name__)

STAGE = "recommendations"
RAW_LOG_LIMIT = 500


def parse_recommendations(payload: Any) -> list[Recommendation]:
    """Validate the oracle's JSON array. Any bad item rejects the whole response."""
    if not isinstance(payload, list):
        raise OracleContractError(
            f"Expected a JSON array, got {type(payload).__name__}", raw=payload
        )

    items: list[Recommendation] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise OracleContractError(f"Item {index} is not an object", raw=payload)
        try:
            items.append(Recommendation.model_validate(item))
        except ValidationError as e:
            raise OracleContractError(
                f"Item {index} violates the recommendation format: {e}", raw=payload
            ) from e
    return items


async def fetch_recommendations(
    interests: str, events: Sequence[Event],
) -> list[Recommendation]:
    """Build the prompt, make one oracle call and parse the result.

    Raises:
        OracleTransportError: The call did not complete.
        OracleContractError: The response is not the agreed JSON array.
    """
    prompt = build_prompt(interests, events, count=settings.RECOMMENDATION_COUNT)
    payload = await call_llm_json(prompt, stage=STAGE)
    return parse_recommendations(payload)


async def get_recommendations(
    interests: str, events: Sequence[Event],
) -> list[Recommendation]:
    """Recommendations for ``interests``, or an empty list if the oracle fails.

    Non-raising entry point for callers that don't need to tell a failure
    from an empty answer. ``RecommendationPipeline`` calls
    ``fetch_recommendations`` instead so it can report ``failed``/``error``.
    """
    try:
        return await fetch_recommendations(interests, events)
    except OracleError as e:
        log_oracle_failure(e)
        return []
    except Exception as e:
        logger.warning("Unexpected error fetching recommendations: %s", e)
        return []


def log_oracle_failure(error: Exception) -> None:
    raw = getattr(error, "raw", None)
    if raw is not None:
        logger.warning(
            "Recommendation oracle failed: %s | raw=%.*s",
            error, RAW_LOG_LIMIT, str(raw),
        )
    else:
        logger.warning("Recommendation oracle failed: %s", error)
