"""SQLAlchemy models."""

from dorehami.models.base import Base
from dorehami.models.booking import Booking, BookingStatus
from dorehami.models.event import Event, EventStatus
from dorehami.models.user import User

__all__ = [
    "Base",
    "Event",
    "EventStatus",
    "Booking",
    "BookingStatus",
    "User",
]
