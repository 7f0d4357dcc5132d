"""Bookings API endpoints."""

from fastapi import APIRouter, Query

from dorehami.api.v1.dependencies import BookingServiceDep, CurrentUser
from dorehami.exceptions import ForbiddenError, NotFoundError
from dorehami.models.booking import Booking
from dorehami.models.booking import BookingStatus as ModelBookingStatus
from dorehami.schemas.booking import BookingResponse, BookingStatus, BookingTimeframe

router = APIRouter()


def _owned(booking: Booking | None, current_user: int) -> Booking:
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.user_id != current_user:
        raise ForbiddenError("Not authorized to view this booking")
    return booking


@router.get(
    "",
    response_model=list[BookingResponse],
    summary="Get user's bookings",
)
async def get_my_bookings(
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
    status_filter: BookingStatus | None = Query(None, alias="status"),
    when: BookingTimeframe | None = None,
) -> list[BookingResponse]:
    """
    Get all bookings for the current user, newest first.

    `when=upcoming` keeps events that have not started yet, soonest first;
    `when=past` keeps the rest, most recent first.
    """
    db_status = ModelBookingStatus(status_filter.value) if status_filter else None
    bookings = await booking_service.get_user_bookings(current_user, db_status, when)
    return [BookingResponse.model_validate(b) for b in bookings]


@router.get(
    "/reference/{reference}",
    response_model=BookingResponse,
    summary="Get booking by reference",
)
async def get_booking_by_reference(
    reference: str,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    booking = await booking_service.get_booking_by_reference(reference)
    return BookingResponse.model_validate(_owned(booking, current_user))


@router.get(
    "/session/{session_id}",
    response_model=BookingResponse,
    summary="Get booking by checkout session",
)
async def get_booking_by_session(
    session_id: str,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    """
    Look up the booking a checkout session produced.

    The success page polls this until the payment callback has been
    processed; 404 means not yet.
    """
    booking = await booking_service.get_booking_by_session(session_id)
    return BookingResponse.model_validate(_owned(booking, current_user))


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get booking details",
)
async def get_booking(
    booking_id: int,
    current_user: CurrentUser,
    booking_service: BookingServiceDep,
) -> BookingResponse:
    booking = await booking_service.get_booking(booking_id)
    return BookingResponse.model_validate(_owned(booking, current_user))
