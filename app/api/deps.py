from datetime import date

from fastapi import Depends, Query

from app.schemas.event import FilterCriteria
from app.services.event_repository import SupabaseEventRepository
from app.services.recommendation.service import RecommendationPipeline

_repository: SupabaseEventRepository | None = None


def get_repository() -> SupabaseEventRepository:
    global _repository
    if _repository is None:
        _repository = SupabaseEventRepository()
    return _repository


def get_pipeline(
    repository: SupabaseEventRepository = Depends(get_repository),
) -> RecommendationPipeline:
    return RecommendationPipeline(repository)


def get_filter_criteria(
    q: str | None = Query(None, description="Search title, club or tags"),
    department: str | None = Query(None, description="Exact department"),
    date: date | None = Query(None, description="Exact event date (YYYY-MM-DD)"),
    types: str | None = Query(None, description="Comma-separated event types; any may match"),
) -> FilterCriteria:
    return FilterCriteria.from_query(q=q, department=department, date=date, types=types)
