"""Payment processor callback handling.

A verified ``checkout.session.completed`` callback records the booking and
adds the purchased tickets to the event's attendance in one transaction.
Business-invalid callbacks (missing metadata, unknown purchaser) are logged
and acknowledged: the processor would only redeliver them unchanged.
"""

import logging
from dataclasses import dataclass

import redis.asyncio as redis
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dorehami.claims import ClaimHeldError, RedisClaim
from dorehami.config import get_settings
from dorehami.exceptions import PaymentProcessorError
from dorehami.models.booking import Booking, BookingStatus
from dorehami.payments.stripe_gateway import (
    StripeGateway,
    calculate_platform_fee,
    from_minor_units,
)
from dorehami.schemas.webhook import (
    CheckoutSessionCompletedEvent,
    CheckoutSessionObject,
    PaymentIntentSucceededEvent,
    WebhookEvent,
    parse_webhook_event,
)
from dorehami.services.booking_service import BookingService
from dorehami.services.event_service import EventService
from dorehami.services.user_service import UserService

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass(frozen=True)
class CheckoutMetadata:
    event_id: int
    user_id: int
    quantity: int


def parse_checkout_metadata(metadata: dict[str, str]) -> CheckoutMetadata | None:
    """Read the correlation fields embedded at session creation, or None if unusable."""
    try:
        event_id = int(metadata["eventId"])
        user_id = int(metadata["userId"])
        quantity = int(metadata["quantity"])
    except (KeyError, TypeError, ValueError):
        return None
    if quantity < 1:
        return None
    return CheckoutMetadata(event_id=event_id, user_id=user_id, quantity=quantity)


class WebhookService:
    """Service dispatching verified processor callbacks."""

    def __init__(
        self,
        db: AsyncSession,
        redis_client: redis.Redis,
        gateway: StripeGateway,
    ):
        self.db = db
        self.redis = redis_client
        self.gateway = gateway
        self.booking_service = BookingService(db)
        self.event_service = EventService(db)
        self.user_service = UserService(db)

    async def handle(self, payload: bytes | str, signature: str | None) -> WebhookEvent | None:
        """
        Verify, parse and dispatch one callback.

        Raises:
            PaymentConfigurationError: No webhook secret configured
            WebhookSignatureError: Signature missing or invalid; nothing is processed

        Returns:
            The parsed event, or None if the verified body could not be parsed.
        """
        raw_event = self.gateway.verify_webhook(payload, signature)

        try:
            event = parse_webhook_event(raw_event)
        except ValidationError as exc:
            logger.error(f"Malformed webhook payload {raw_event.get('id')}: {exc}")
            return None

        if isinstance(event, CheckoutSessionCompletedEvent):
            await self.handle_checkout_completed(event.data.object)
        elif isinstance(event, PaymentIntentSucceededEvent):
            logger.info(f"Payment intent succeeded: {event.data.object.id}")
        else:
            logger.info(f"Unhandled event type {event.type}")

        return event

    async def handle_checkout_completed(self, session: CheckoutSessionObject) -> Booking | None:
        """
        Record the booking for a paid checkout session.

        Duplicate deliveries for the same session are a no-op.

        Returns:
            The booking recorded by this call, or None if nothing was recorded.
        """
        metadata = parse_checkout_metadata(session.metadata)
        if metadata is None:
            logger.error(f"Missing required metadata in checkout session {session.id}")
            return None

        try:
            async with RedisClaim(self.redis, f"checkout:{session.id}"):
                return await self._record_booking(session, metadata)
        except ClaimHeldError:
            logger.info(f"Checkout session {session.id} is already being processed")
            return None

    async def _record_booking(
        self,
        session: CheckoutSessionObject,
        metadata: CheckoutMetadata,
    ) -> Booking | None:
        existing = await self.booking_service.get_booking_by_session(session.id)
        if existing:
            logger.info(
                f"Duplicate delivery for checkout session {session.id}; "
                f"booking {existing.booking_reference} already recorded"
            )
            return None

        purchaser = await self.user_service.get_user(metadata.user_id)
        if not purchaser:
            logger.error(f"Purchaser {metadata.user_id} not found for checkout session {session.id}")
            return None

        contact_email, contact_phone = purchaser.email, purchaser.phone

        event = await self.event_service.get_event(metadata.event_id)
        if not event:
            logger.error(f"Event {metadata.event_id} not found for checkout session {session.id}")
            return None

        reference = await self.booking_service.generate_unique_reference()
        amount_total = session.amount_total or 0
        status = BookingStatus.COMPLETED

        try:
            reserved = await self.event_service.reserve_attendance(
                metadata.event_id, metadata.quantity
            )
        except SQLAlchemyError as exc:
            # The booking still stands; attendance is reconciled later
            logger.error(
                f"Error updating attendance for event {metadata.event_id} "
                f"(session {session.id}): {exc}"
            )
            await self.db.rollback()
        else:
            if not reserved:
                status = await self._refund_oversold(session, metadata)

        booking = self.booking_service.create_booking(
            booking_reference=reference,
            event_id=metadata.event_id,
            user_id=metadata.user_id,
            quantity=metadata.quantity,
            total_amount=from_minor_units(amount_total),
            currency=(session.currency or settings.STRIPE_CURRENCY).lower(),
            platform_fee=from_minor_units(calculate_platform_fee(amount_total)),
            stripe_session_id=session.id,
            stripe_payment_intent_id=session.payment_intent,
            contact_email=contact_email,
            contact_phone=contact_phone,
            status=status,
        )

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Booking for checkout session {session.id} was recorded concurrently")
            return None

        await self.db.refresh(booking)
        logger.info(
            f"Successfully processed booking {booking.booking_reference} "
            f"({booking.booking_id}) for event {metadata.event_id}: {status.value}"
        )
        return booking

    async def _refund_oversold(
        self,
        session: CheckoutSessionObject,
        metadata: CheckoutMetadata,
    ) -> BookingStatus:
        """
        Refund a payment confirmed after the event filled up.

        Returns REFUNDED once the refund is accepted. If it is not, the paid
        booking is kept as COMPLETED without attendance and flagged in the log.
        """
        logger.error(
            f"Event {metadata.event_id} has no capacity left for {metadata.quantity} "
            f"tickets paid in session {session.id}; refunding"
        )
        if not session.payment_intent:
            logger.error(f"Session {session.id} has no payment intent to refund; needs reconciliation")
            return BookingStatus.COMPLETED
        try:
            await self.gateway.refund_payment_intent(session.payment_intent)
        except PaymentProcessorError as exc:
            logger.error(
                f"Refund failed for session {session.id}: {exc.message}; "
                "booking kept without attendance, needs reconciliation"
            )
            return BookingStatus.COMPLETED
        return BookingStatus.REFUNDED
