"""Booking service."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from dorehami.models.booking import Booking, BookingStatus
from dorehami.models.event import Event
from dorehami.schemas.booking import BookingTimeframe
from dorehami.timeutils import to_db, utcnow

REFERENCE_PREFIX = "DH-"
REFERENCE_LENGTH = 10


class BookingService:
    """Service for booking records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def generate_booking_reference(self) -> str:
        """Generate a short booking reference from the random part of a ULID."""
        return f"{REFERENCE_PREFIX}{str(ULID())[-REFERENCE_LENGTH:]}"

    async def generate_unique_reference(self, attempts: int = 5) -> str:
        """Generate a booking reference not used by any stored booking."""
        for _ in range(attempts):
            reference = self.generate_booking_reference()
            if await self.get_booking_by_reference(reference) is None:
                return reference
        raise RuntimeError("Could not generate a unique booking reference")

    def create_booking(
        self,
        *,
        booking_reference: str,
        event_id: int,
        user_id: int,
        quantity: int,
        total_amount: Decimal,
        currency: str,
        platform_fee: Decimal,
        stripe_session_id: str,
        stripe_payment_intent_id: str | None,
        contact_email: str | None,
        contact_phone: str | None,
        status: BookingStatus = BookingStatus.COMPLETED,
    ) -> Booking:
        """Add a booking to the session. The caller commits."""
        booking = Booking(
            booking_reference=booking_reference,
            event_id=event_id,
            user_id=user_id,
            quantity=quantity,
            total_amount=total_amount,
            currency=currency,
            platform_fee=platform_fee,
            status=status,
            payment_method="stripe",
            stripe_session_id=stripe_session_id,
            stripe_payment_intent_id=stripe_payment_intent_id,
            contact_email=contact_email,
            contact_phone=contact_phone,
        )
        self.db.add(booking)
        return booking

    async def get_booking(self, booking_id: int) -> Booking | None:
        """Get booking by ID."""
        result = await self.db.execute(
            select(Booking).where(Booking.booking_id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_booking_by_reference(self, reference: str) -> Booking | None:
        """Get booking by reference."""
        result = await self.db.execute(
            select(Booking).where(Booking.booking_reference == reference)
        )
        return result.scalar_one_or_none()

    async def get_booking_by_session(self, session_id: str) -> Booking | None:
        """Get the booking recorded for a checkout session."""
        result = await self.db.execute(
            select(Booking).where(Booking.stripe_session_id == session_id)
        )
        return result.scalar_one_or_none()

    async def get_user_bookings(
        self,
        user_id: int,
        status: BookingStatus | None = None,
        timeframe: BookingTimeframe | None = None,
        now: datetime | None = None,
    ) -> list[Booking]:
        """
        Get bookings for a user, newest first.

        ``timeframe`` splits them on the booked event's start: upcoming events
        start at or after ``now`` and come soonest first, past ones come most
        recent first.
        """
        query = select(Booking).where(Booking.user_id == user_id)

        if status:
            query = query.where(Booking.status == status)

        if timeframe is None:
            query = query.order_by(Booking.created_at.desc(), Booking.booking_id.desc())
        else:
            cutoff = to_db(now or utcnow())
            query = query.join(Event, Event.event_id == Booking.event_id)
            if timeframe == BookingTimeframe.UPCOMING:
                query = query.where(Event.start_datetime >= cutoff).order_by(
                    Event.start_datetime.asc(), Booking.booking_id.asc()
                )
            else:
                query = query.where(Event.start_datetime < cutoff).order_by(
                    Event.start_datetime.desc(), Booking.booking_id.desc()
                )

        result = await self.db.execute(query)
        return list(result.scalars().all())
