"""API dependencies."""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dorehami.config import get_settings
from dorehami.database import get_db, get_session_factory
from dorehami.exceptions import AuthenticationRequiredError
from dorehami.payments.stripe_gateway import StripeGateway, get_stripe_gateway
from dorehami.redis_client import get_redis
from dorehami.services.availability_service import AvailabilityService
from dorehami.services.booking_service import BookingService
from dorehami.services.checkout_service import CheckoutService
from dorehami.services.event_service import EventService
from dorehami.services.payout_service import PayoutService
from dorehami.services.user_service import UserService
from dorehami.services.venue_directory import VenueDirectory, venue_directory
from dorehami.services.webhook_service import WebhookService

# Type aliases
DBSession = Annotated[AsyncSession, Depends(get_db)]
RedisClient = Annotated[redis.Redis, Depends(get_redis)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
Gateway = Annotated[StripeGateway, Depends(get_stripe_gateway)]


def get_optional_gateway() -> StripeGateway | None:
    """Gateway when a secret key is configured, else None."""
    if not get_settings().STRIPE_SECRET_KEY:
        return None
    return get_stripe_gateway()


OptionalGateway = Annotated[StripeGateway | None, Depends(get_optional_gateway)]


async def get_current_user_id(
    x_user_id: Annotated[int | None, Header()] = None,
) -> int:
    """
    Get current application user ID from header.
    The auth provider's session is resolved to this ID upstream.
    """
    if not x_user_id:
        raise AuthenticationRequiredError("X-User-ID header is required")
    return x_user_id


async def get_optional_user_id(
    x_user_id: Annotated[int | None, Header()] = None,
) -> int | None:
    """Acting user on endpoints that are also open to anonymous callers."""
    return x_user_id or None


CurrentUser = Annotated[int, Depends(get_current_user_id)]
OptionalUser = Annotated[int | None, Depends(get_optional_user_id)]


def get_request_origin(request: Request) -> str | None:
    """Origin the browser called from, used for redirect URLs."""
    return request.headers.get("origin")


RequestOrigin = Annotated[str | None, Depends(get_request_origin)]


def get_venue_directory() -> VenueDirectory:
    """Get venue directory."""
    return venue_directory


def get_event_service(db: DBSession) -> EventService:
    """Get event service."""
    return EventService(db)


def get_user_service(db: DBSession) -> UserService:
    """Get user service."""
    return UserService(db)


def get_booking_service(db: DBSession) -> BookingService:
    """Get booking service."""
    return BookingService(db)


def get_availability_service(
    session_factory: SessionFactory,
    venues: Annotated[VenueDirectory, Depends(get_venue_directory)],
) -> AvailabilityService:
    """Get availability service."""
    return AvailabilityService(session_factory, venues)


def get_checkout_service(db: DBSession, gateway: Gateway) -> CheckoutService:
    """Get checkout service."""
    return CheckoutService(db, gateway)


def get_payout_service(db: DBSession, gateway: Gateway) -> PayoutService:
    """Get payout service."""
    return PayoutService(db, gateway)


def get_webhook_service(
    db: DBSession,
    redis_client: RedisClient,
    gateway: Gateway,
) -> WebhookService:
    """Get webhook service."""
    return WebhookService(db, redis_client, gateway)


# Annotated dependencies
VenueDirectoryDep = Annotated[VenueDirectory, Depends(get_venue_directory)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
AvailabilityServiceDep = Annotated[AvailabilityService, Depends(get_availability_service)]
CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]
PayoutServiceDep = Annotated[PayoutService, Depends(get_payout_service)]
WebhookServiceDep = Annotated[WebhookService, Depends(get_webhook_service)]
