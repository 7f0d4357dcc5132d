"""Event schemas."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import Field, model_validator

from dorehami.schemas.common import BaseSchema, UTCDateTime
from dorehami.timeutils import to_utc


class EventStatus(str, Enum):
    """Event status enum."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"


class EventBase(BaseSchema):
    """Fields shared by create and update payloads."""

    description: str | None = None
    short_description: str | None = Field(None, max_length=500)
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    timezone: str = "UTC"
    is_all_day: bool = False
    start_date: date | None = None
    end_date: date | None = None
    venue_id: int | None = None
    capacity: int | None = Field(None, ge=1)
    ticket_price: Decimal | None = Field(None, ge=0, decimal_places=2)
    banner_image_url: str | None = Field(None, max_length=1024)
    tags: list[str] | None = None

    @model_validator(mode="after")
    def check_schedule(self):
        if self.start_datetime and self.end_datetime:
            tz_name = self.timezone or "UTC"
            if to_utc(self.end_datetime, tz_name) <= to_utc(self.start_datetime, tz_name):
                raise ValueError("End date and time must be after start date and time")
        if self.is_all_day and self.start_date is None and self.start_datetime is None:
            raise ValueError("All-day events need a start date")
        return self


class EventCreate(EventBase):
    """Schema for creating an event; drafts need only a title."""

    title: str = Field(..., min_length=1, max_length=255)
    publish: bool = False


class EventUpdate(EventBase):
    """Schema for updating an event."""

    title: str | None = Field(None, min_length=1, max_length=255)
    timezone: str | None = None
    is_all_day: bool | None = None


class EventResponse(BaseSchema):
    """Schema for event response."""

    event_id: int
    title: str
    description: str | None
    short_description: str | None
    start_datetime: UTCDateTime
    end_datetime: UTCDateTime
    timezone: str
    is_all_day: bool
    venue_id: int | None
    capacity: int | None
    current_attendance: int
    remaining_capacity: int
    ticket_price: Decimal | None
    status: EventStatus
    organizer_id: int
    banner_image_url: str | None
    tags: list[str] | None
    published_at: UTCDateTime | None
    created_at: datetime | None = None
