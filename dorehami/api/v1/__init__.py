"""API v1 routers package."""

from dorehami.api.v1.availability import router as availability_router
from dorehami.api.v1.bookings import router as bookings_router
from dorehami.api.v1.checkout import router as checkout_router
from dorehami.api.v1.events import router as events_router
from dorehami.api.v1.payments import router as payments_router
from dorehami.api.v1.payouts import router as payouts_router
from dorehami.api.v1.users import router as users_router
from dorehami.api.v1.venues import router as venues_router
from dorehami.api.v1.webhooks import router as webhooks_router

__all__ = [
    "venues_router",
    "availability_router",
    "events_router",
    "users_router",
    "checkout_router",
    "webhooks_router",
    "bookings_router",
    "payouts_router",
    "payments_router",
]
