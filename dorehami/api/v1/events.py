"""Events API endpoints."""

from fastapi import APIRouter, Query, status

from dorehami.api.v1.dependencies import CurrentUser, EventServiceDep, OptionalUser
from dorehami.models.event import EventStatus as ModelEventStatus
from dorehami.schemas.common import PaginatedResponse, SuccessResponse
from dorehami.schemas.event import EventCreate, EventResponse, EventStatus, EventUpdate

router = APIRouter()


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new event",
)
async def create_event(
    event_data: EventCreate,
    current_user: CurrentUser,
    event_service: EventServiceDep,
) -> EventResponse:
    """Create an event as a draft, or publish it with `publish: true`."""
    event = await event_service.create_event(current_user, event_data)
    return EventResponse.model_validate(event)


@router.get(
    "",
    response_model=PaginatedResponse[EventResponse],
    summary="List published events",
)
async def list_events(
    event_service: EventServiceDep,
    upcoming: bool = False,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[EventResponse]:
    """List published events, soonest first."""
    events, total = await event_service.get_events(
        page=page,
        page_size=page_size,
        upcoming_only=upcoming,
    )

    total_pages = (total + page_size - 1) // page_size

    return PaginatedResponse(
        items=[EventResponse.model_validate(e) for e in events],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )


@router.get(
    "/mine",
    response_model=list[EventResponse],
    summary="List my events",
)
async def list_my_events(
    current_user: CurrentUser,
    event_service: EventServiceDep,
    status_filter: EventStatus | None = Query(None, alias="status"),
) -> list[EventResponse]:
    """List the current organizer's events, optionally only drafts or published ones."""
    db_status = ModelEventStatus(status_filter.value) if status_filter else None
    events = await event_service.get_organizer_events(current_user, db_status)
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get event details",
)
async def get_event(
    event_id: int,
    viewer: OptionalUser,
    event_service: EventServiceDep,
) -> EventResponse:
    """Get event details. Drafts are only visible to their organizer."""
    event = await event_service.get_visible_event(event_id, viewer)
    return EventResponse.model_validate(event)


@router.patch(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update event",
)
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    current_user: CurrentUser,
    event_service: EventServiceDep,
) -> EventResponse:
    """Update an event."""
    event = await event_service.update_event(event_id, current_user, event_data)
    return EventResponse.model_validate(event)


@router.post(
    "/{event_id}/publish",
    response_model=EventResponse,
    summary="Publish event",
)
async def publish_event(
    event_id: int,
    current_user: CurrentUser,
    event_service: EventServiceDep,
) -> EventResponse:
    """Publish a draft event."""
    event = await event_service.publish_event(event_id, current_user)
    return EventResponse.model_validate(event)


@router.post(
    "/{event_id}/cancel",
    response_model=EventResponse,
    summary="Cancel event",
)
async def cancel_event(
    event_id: int,
    current_user: CurrentUser,
    event_service: EventServiceDep,
) -> EventResponse:
    """Cancel an event and free its venue slot."""
    event = await event_service.cancel_event(event_id, current_user)
    return EventResponse.model_validate(event)


@router.delete(
    "/{event_id}",
    response_model=SuccessResponse,
    summary="Delete draft",
)
async def delete_draft(
    event_id: int,
    current_user: CurrentUser,
    event_service: EventServiceDep,
) -> SuccessResponse:
    await event_service.delete_draft(event_id, current_user)
    return SuccessResponse(message="Draft deleted")
