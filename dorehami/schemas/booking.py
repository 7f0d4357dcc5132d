"""Booking schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from dorehami.schemas.common import BaseSchema


class BookingStatus(str, Enum):
    """Booking status enum."""

    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class BookingTimeframe(str, Enum):
    """Whether the booked event starts in the future or already started."""

    UPCOMING = "upcoming"
    PAST = "past"


class BookingResponse(BaseSchema):
    """Schema for booking response."""

    booking_id: int
    booking_reference: str
    event_id: int
    user_id: int
    quantity: int
    total_amount: Decimal
    currency: str
    platform_fee: Decimal
    status: BookingStatus
    payment_method: str
    stripe_session_id: str
    contact_email: str | None
    created_at: datetime | None = None
