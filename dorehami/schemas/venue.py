"""Venue and availability schemas."""

from enum import Enum

from pydantic import Field, model_validator

from dorehami.schemas.common import BaseSchema, UTCDateTime


class VenueType(str, Enum):
    """Venue type enum."""

    INDOOR = "Indoor"
    OUTDOOR = "Outdoor"


class VenueImage(BaseSchema):
    url: str
    alt: str


class Venue(BaseSchema):
    """Venue reference data."""

    venue_id: int
    name: str
    capacity: int
    type: VenueType
    catering: bool
    menu_link: str | None = None
    images: list[VenueImage] = []


class MenuResponse(BaseSchema):
    venue_id: int
    name: str
    menu_link: str


class AvailabilityRequest(BaseSchema):
    """Schema for checking one venue over a proposed time range."""

    venue_id: int
    start_date_time: UTCDateTime
    end_date_time: UTCDateTime
    exclude_event_id: int | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date_time >= self.end_date_time:
            raise ValueError("End date and time must be after start date and time")
        return self


class BatchAvailabilityRequest(BaseSchema):
    """Schema for checking every venue over a proposed time range."""

    start_date_time: UTCDateTime
    end_date_time: UTCDateTime
    exclude_event_id: int | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date_time >= self.end_date_time:
            raise ValueError("End date and time must be after start date and time")
        return self


class ConflictingEvent(BaseSchema):
    """An existing event overlapping the proposed range."""

    id: int = Field(validation_alias="event_id")
    title: str
    start: UTCDateTime = Field(validation_alias="start_datetime")
    end: UTCDateTime = Field(validation_alias="end_datetime")


class VenueAvailability(BaseSchema):
    """Availability result for one venue."""

    venue_id: int
    is_available: bool
    conflicting_events: list[ConflictingEvent] = []
