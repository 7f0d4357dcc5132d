"""Services package."""

from dorehami.services.availability_service import AvailabilityService
from dorehami.services.booking_service import BookingService
from dorehami.services.checkout_service import CheckoutService
from dorehami.services.event_service import EventService
from dorehami.services.payout_service import PayoutService
from dorehami.services.user_service import UserService
from dorehami.services.venue_directory import VenueDirectory, venue_directory
from dorehami.services.webhook_service import WebhookService

__all__ = [
    "AvailabilityService",
    "BookingService",
    "CheckoutService",
    "EventService",
    "PayoutService",
    "UserService",
    "VenueDirectory",
    "WebhookService",
    "venue_directory",
]
