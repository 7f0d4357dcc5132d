"""Booking model."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dorehami.models.base import Base, BigIntPK

if TYPE_CHECKING:
    from dorehami.models.event import Event


class BookingStatus(str, enum.Enum):
    """Booking status enum."""

    COMPLETED = "COMPLETED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class Booking(Base):
    """Booking model representing a paid ticket purchase."""

    __tablename__ = "bookings"

    booking_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    booking_reference: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    event_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("events.event_id"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.COMPLETED, nullable=False
    )
    payment_method: Mapped[str] = mapped_column(String(20), default="stripe", nullable=False)

    # Unique per checkout attempt; guards against duplicate callback delivery
    stripe_session_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    stripe_payment_intent_id: Mapped[str | None] = mapped_column(String(255))

    contact_email: Mapped[str | None] = mapped_column(String(255))
    contact_phone: Mapped[str | None] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )

    # Relationships
    event: Mapped["Event"] = relationship("Event", back_populates="bookings")

    __table_args__ = (
        Index("idx_booking_user_id", "user_id"),
        Index("idx_booking_event_id", "event_id"),
        Index("idx_booking_status", "status"),
    )
