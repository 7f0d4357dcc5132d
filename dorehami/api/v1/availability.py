"""Venue availability API endpoints."""

from fastapi import APIRouter

from dorehami.api.v1.dependencies import AvailabilityServiceDep
from dorehami.schemas.venue import (
    AvailabilityRequest,
    BatchAvailabilityRequest,
    VenueAvailability,
)

router = APIRouter()


@router.post(
    "",
    response_model=VenueAvailability,
    summary="Check one venue",
)
async def check_availability(
    request: AvailabilityRequest,
    availability_service: AvailabilityServiceDep,
) -> VenueAvailability:
    """
    Check whether a venue is free over a time range.

    Cancelled events never block a venue. Pass `excludeEventId` when
    editing an event so it does not conflict with itself.
    """
    return await availability_service.check_venue(
        request.venue_id,
        request.start_date_time,
        request.end_date_time,
        request.exclude_event_id,
    )


@router.post(
    "/batch",
    response_model=list[VenueAvailability],
    summary="Check every venue",
)
async def check_batch_availability(
    request: BatchAvailabilityRequest,
    availability_service: AvailabilityServiceDep,
) -> list[VenueAvailability]:
    """Check every venue over a time range, one result per venue."""
    return await availability_service.check_all_venues(
        request.start_date_time,
        request.end_date_time,
        request.exclude_event_id,
    )
