"""Checkout service: turns a purchase request into a hosted payment session."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from dorehami.config import get_settings
from dorehami.exceptions import (
    CapacityExceededError,
    EventNotOnSaleError,
    FreeEventError,
    InvalidRequestError,
    NotFoundError,
    PayoutSetupRequiredError,
)
from dorehami.models.event import EventStatus
from dorehami.payments.stripe_gateway import (
    StripeGateway,
    calculate_platform_fee,
    to_minor_units,
)
from dorehami.schemas.payment import CheckoutSessionResponse
from dorehami.services.event_service import EventService
from dorehami.services.user_service import UserService

logger = logging.getLogger(__name__)

settings = get_settings()


class CheckoutService:
    """Service creating checkout sessions for ticket purchases."""

    def __init__(self, db: AsyncSession, gateway: StripeGateway):
        self.db = db
        self.gateway = gateway
        self.event_service = EventService(db)
        self.user_service = UserService(db)

    async def create_checkout_session(
        self,
        event_id: int,
        user_id: int,
        quantity: int = 1,
        origin: str | None = None,
    ) -> CheckoutSessionResponse:
        """
        Create a checkout session for ``quantity`` tickets to an event.

        Every precondition is checked before the processor is called, so a
        failed check leaves no session behind. Only reads local storage.

        Args:
            event_id: Event ID
            user_id: Purchasing user ID
            quantity: Number of tickets
            origin: Base URL the purchaser returns to

        Returns:
            Session id and the hosted checkout URL

        Raises:
            InvalidRequestError: Bad quantity
            NotFoundError: Unknown purchaser, event or organizer
            EventNotOnSaleError: Event is not published
            FreeEventError: Event has no ticket price
            CapacityExceededError: Fewer tickets left than requested
            PayoutSetupRequiredError: Organizer cannot receive payouts yet
            PaymentProcessorError: Stripe rejected the session
        """
        if quantity < 1:
            raise InvalidRequestError("Quantity must be at least 1")
        if quantity > settings.MAX_TICKETS_PER_PURCHASE:
            raise InvalidRequestError(
                f"Cannot buy more than {settings.MAX_TICKETS_PER_PURCHASE} tickets at once"
            )

        purchaser = await self.user_service.get_user(user_id)
        if not purchaser:
            raise NotFoundError("User not found")

        event = await self.event_service.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")

        if event.status != EventStatus.PUBLISHED:
            raise EventNotOnSaleError(event_id)

        if event.is_free:
            raise FreeEventError()

        remaining = event.remaining_capacity
        if quantity > remaining:
            raise CapacityExceededError(remaining)

        organizer = await self.user_service.get_user(event.organizer_id)
        if not organizer:
            raise NotFoundError("Event organizer not found")
        if not organizer.payout_ready:
            raise PayoutSetupRequiredError()

        unit_amount = to_minor_units(event.ticket_price)
        total_amount = unit_amount * quantity
        application_fee = calculate_platform_fee(total_amount)

        base_url = (origin or settings.APP_BASE_URL).rstrip("/")
        description = event.short_description
        if not description and event.description:
            description = event.description[:100] + "..."

        session = await self.gateway.create_checkout_session(
            title=event.title,
            description=description,
            images=[event.banner_image_url] if event.banner_image_url else [],
            unit_amount=unit_amount,
            quantity=quantity,
            currency=settings.STRIPE_CURRENCY,
            application_fee_amount=application_fee,
            destination_account=organizer.stripe_account_id,
            success_url=(
                f"{base_url}/event/{event_id}?payment=success"
                "&session_id={CHECKOUT_SESSION_ID}"
            ),
            cancel_url=f"{base_url}/event/{event_id}?payment=cancelled",
            metadata={
                "eventId": str(event_id),
                "userId": str(user_id),
                "quantity": str(quantity),
                "organizerId": str(organizer.user_id),
            },
        )

        logger.info(
            f"Checkout session {session.id} created for event {event_id}: "
            f"{quantity} x {unit_amount} (fee {application_fee})"
        )
        return CheckoutSessionResponse(session_id=session.id, url=session.url)
