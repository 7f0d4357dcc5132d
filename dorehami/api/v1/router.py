"""API v1 main router."""

from fastapi import APIRouter

from dorehami.api.v1.availability import router as availability_router
from dorehami.api.v1.bookings import router as bookings_router
from dorehami.api.v1.checkout import router as checkout_router
from dorehami.api.v1.events import router as events_router
from dorehami.api.v1.payments import router as payments_router
from dorehami.api.v1.payouts import router as payouts_router
from dorehami.api.v1.users import router as users_router
from dorehami.api.v1.venues import router as venues_router
from dorehami.api.v1.webhooks import router as webhooks_router

router = APIRouter(prefix="/v1")

router.include_router(venues_router, prefix="/venues", tags=["Venues"])
router.include_router(availability_router, prefix="/availability", tags=["Availability"])
router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(checkout_router, prefix="/checkout", tags=["Checkout"])
router.include_router(webhooks_router, prefix="/webhooks", tags=["Webhooks"])
router.include_router(bookings_router, prefix="/bookings", tags=["Bookings"])
router.include_router(payouts_router, prefix="/payouts", tags=["Payouts"])
router.include_router(payments_router, prefix="/payments", tags=["Payments"])
