"""AI event recommendations API."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_pipeline
from app.schemas.recommendation import RecommendationRequest, RecommendationResponse
from app.services.errors import RepositoryError
from app.services.recommendation.service import RecommendationPipeline

router = APIRouter()


@router.post(
    "/",
    response_model=RecommendationResponse,
    summary="Recommend events",
    description="Match free-text interests against all stored events using the language "
    "model. Oracle failures return an empty list with `failed=true` rather than an error.",
)
async def recommend(
    data: RecommendationRequest,
    pipeline: RecommendationPipeline = Depends(get_pipeline),
):
    try:
        outcome = await pipeline.run(data.interests)
    except RepositoryError as e:
        raise HTTPException(status_code=502, detail=f"Event store unavailable: {e}") from e

    return RecommendationResponse(
        interests=outcome.interests,
        items=outcome.recommendations,
        total=len(outcome.recommendations),
        failed=outcome.failed,
        error=outcome.error,
    )
