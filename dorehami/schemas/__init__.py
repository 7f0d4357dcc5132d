"""Pydantic schemas for API request/response."""

from dorehami.schemas.booking import BookingResponse, BookingStatus
from dorehami.schemas.event import EventCreate, EventResponse, EventStatus, EventUpdate
from dorehami.schemas.payment import CheckoutSessionCreate, CheckoutSessionResponse
from dorehami.schemas.venue import (
    AvailabilityRequest,
    BatchAvailabilityRequest,
    Venue,
    VenueAvailability,
)

__all__ = [
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventStatus",
    "Venue",
    "AvailabilityRequest",
    "BatchAvailabilityRequest",
    "VenueAvailability",
    "BookingResponse",
    "BookingStatus",
    "CheckoutSessionCreate",
    "CheckoutSessionResponse",
]
