"""Timezone normalisation helpers."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dorehami.exceptions import InvalidRequestError


def get_zone(name: str | None) -> ZoneInfo:
    """Resolve an IANA timezone name, defaulting to UTC."""
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidRequestError(f"Unknown timezone: {name}")


def to_utc(value: datetime, tz_name: str | None = None) -> datetime:
    """
    Normalise a datetime to an aware UTC instant.

    Naive values are read in ``tz_name`` (UTC when not given).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_zone(tz_name))
    return value.astimezone(timezone.utc)


def to_db(value: datetime, tz_name: str | None = None) -> datetime:
    """Convert to the naive UTC form stored in the database."""
    return to_utc(value, tz_name).replace(tzinfo=None)


def from_db(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive instant read back from the database."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def all_day_span(
    start: date,
    end: date | None,
    tz_name: str | None,
) -> tuple[datetime, datetime]:
    """
    Expand a date-only range to UTC instants.

    The span starts at local midnight of ``start`` and ends at local midnight
    after ``end`` (inclusive end date), in the event's timezone.
    """
    zone = get_zone(tz_name)
    last_day = end or start
    if last_day < start:
        raise InvalidRequestError("End date must not be before start date")
    start_local = datetime.combine(start, time.min, tzinfo=zone)
    end_local = datetime.combine(last_day + timedelta(days=1), time.min, tzinfo=zone)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)


def validate_range(start: datetime, end: datetime) -> None:
    """Raise unless ``start`` is strictly before ``end``."""
    if to_utc(start) >= to_utc(end):
        raise InvalidRequestError("End date and time must be after start date and time")
