from fastapi import APIRouter, Depends, Query

from app.api.deps import get_repository
from app.config import settings
from app.services import supabase_client
from app.services.event_repository import SupabaseEventRepository
from app.services.llm_call_tracker import get_tracker

router = APIRouter()


@router.get(
    "/",
    summary="System health check",
    description="Check event store connectivity and whether the recommendation oracle is configured.",
)
async def health_check(
    repository: SupabaseEventRepository = Depends(get_repository),
):
    store_status = "not_configured"
    if supabase_client.is_configured():
        store_status = "connected" if await repository.ping() else "error"

    return {
        "status": "ok",
        "event_store": store_status,
        "oracle": "configured" if settings.GEMINI_API_KEY else "not_configured",
        "oracle_model": settings.GEMINI_MODEL,
    }


@router.get(
    "/oracle",
    summary="Oracle call log",
    description="Usage summary and the most recent oracle calls, including raw payloads of failures.",
)
async def oracle_calls(
    limit: int = Query(20, ge=1, le=200),
    failed_only: bool = Query(False, description="Only failed calls"),
):
    tracker = get_tracker()
    return {
        "summary": tracker.get_summary(),
        "calls": tracker.export_audit_trail(limit=limit, failed_only=failed_only),
    }
