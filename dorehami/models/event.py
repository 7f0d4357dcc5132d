"""Event model."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dorehami.models.base import Base, BigIntPK

if TYPE_CHECKING:
    from dorehami.models.booking import Booking
    from dorehami.models.user import User


class EventStatus(str, enum.Enum):
    """Event status enum."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"


class Event(Base):
    """Event model representing a cultural event an organizer sells tickets for."""

    __tablename__ = "events"

    event_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    short_description: Mapped[str | None] = mapped_column(String(500))

    # Naive UTC instants
    start_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_datetime: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)
    is_all_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    venue_id: Mapped[int | None] = mapped_column(Integer)
    capacity: Mapped[int | None] = mapped_column(Integer)
    current_attendance: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    ticket_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))

    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus), default=EventStatus.DRAFT, nullable=False
    )
    organizer_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.user_id"), nullable=False
    )
    banner_image_url: Mapped[str | None] = mapped_column(String(1024))
    tags: Mapped[list[str] | None] = mapped_column(JSON)

    published_at: Mapped[datetime | None] = mapped_column(DateTime)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, onupdate=func.current_timestamp()
    )

    # Relationships
    organizer: Mapped["User"] = relationship("User", back_populates="events")
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="event")

    __table_args__ = (
        CheckConstraint("start_datetime < end_datetime", name="ck_event_schedule"),
        CheckConstraint("current_attendance >= 0", name="ck_event_attendance"),
        Index("idx_event_venue_schedule", "venue_id", "start_datetime", "end_datetime"),
        Index("idx_event_status", "status"),
        Index("idx_event_organizer", "organizer_id"),
    )

    @property
    def remaining_capacity(self) -> int:
        if self.capacity is None:
            return 0
        return max(self.capacity - (self.current_attendance or 0), 0)

    @property
    def is_free(self) -> bool:
        return not self.ticket_price or self.ticket_price <= 0
