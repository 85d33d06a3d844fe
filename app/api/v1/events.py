"""Campus events API: browse, create, update and delete events."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_filter_criteria, get_repository
from app.schemas.common import ErrorResponse
from app.schemas.event import Event, EventCreate, EventOptions, EventUpdate, FilterCriteria
from app.services import event_service
from app.services.errors import EventNotFoundError, EventValidationError, RepositoryError
from app.services.event_repository import SupabaseEventRepository

router = APIRouter()


def _store_unavailable(e: RepositoryError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Event store unavailable: {e}")


def _invalid(e: EventValidationError) -> HTTPException:
    return HTTPException(
        status_code=422, detail={"message": "Invalid event", "errors": e.errors}
    )


@router.get(
    "/",
    response_model=list[Event],
    summary="List events",
    description="Return all events, narrowed by optional search, department, date and "
    "type filters. Filters combine with AND; types match if any selected type is a tag.",
)
async def list_events(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    repository: SupabaseEventRepository = Depends(get_repository),
):
    try:
        return await event_service.list_events(repository, criteria)
    except RepositoryError as e:
        raise _store_unavailable(e) from e


@router.get(
    "/options",
    response_model=EventOptions,
    summary="Filter options",
    description="Departments and event types offered by the filter panel and creation form.",
)
async def event_options():
    return EventOptions(
        departments=event_service.DEPARTMENTS, types=event_service.EVENT_TYPES
    )


@router.get(
    "/{event_id}",
    response_model=Event,
    summary="Event detail",
    responses={404: {"model": ErrorResponse, "description": "Event not found"}},
)
async def get_event(
    event_id: str,
    repository: SupabaseEventRepository = Depends(get_repository),
):
    try:
        event = await repository.get_event_by_id(event_id)
    except RepositoryError as e:
        raise _store_unavailable(e) from e
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post(
    "/",
    response_model=Event,
    status_code=201,
    summary="Create event",
    description="Validate and store a new event. Tags may be a list or a comma-separated string.",
    responses={422: {"description": "Field-level validation errors"}},
)
async def create_event(
    data: EventCreate,
    repository: SupabaseEventRepository = Depends(get_repository),
):
    try:
        return await event_service.create_event(repository, data)
    except EventValidationError as e:
        raise _invalid(e) from e
    except RepositoryError as e:
        raise _store_unavailable(e) from e


@router.patch(
    "/{event_id}",
    response_model=Event,
    summary="Update event",
    description="Apply a partial update. Only supplied fields change; updatedAt is refreshed.",
    responses={404: {"model": ErrorResponse, "description": "Event not found"}},
)
async def update_event(
    event_id: str,
    data: EventUpdate,
    repository: SupabaseEventRepository = Depends(get_repository),
):
    try:
        return await event_service.update_event(repository, event_id, data)
    except EventValidationError as e:
        raise _invalid(e) from e
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail="Event not found") from e
    except RepositoryError as e:
        raise _store_unavailable(e) from e


@router.delete(
    "/{event_id}",
    status_code=204,
    summary="Delete event",
    responses={404: {"model": ErrorResponse, "description": "Event not found"}},
)
async def delete_event(
    event_id: str,
    repository: SupabaseEventRepository = Depends(get_repository),
):
    try:
        if await repository.get_event_by_id(event_id) is None:
            raise HTTPException(status_code=404, detail="Event not found")
        await repository.delete_event(event_id)
    except RepositoryError as e:
        raise _store_unavailable(e) from e
    return Response(status_code=204)
