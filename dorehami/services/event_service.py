"""Event service."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from dorehami.exceptions import (
    BusinessRuleError,
    ForbiddenError,
    InvalidRequestError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from dorehami.models.event import Event, EventStatus
from dorehami.schemas.event import EventCreate, EventUpdate
from dorehami.timeutils import all_day_span, from_db, get_zone, to_db, utcnow, validate_range

logger = logging.getLogger(__name__)

DRAFT_DEFAULT_DURATION = timedelta(hours=2)

# Allowed lifecycle transitions
TRANSITIONS: dict[EventStatus, set[EventStatus]] = {
    EventStatus.DRAFT: {EventStatus.PUBLISHED, EventStatus.CANCELLED},
    EventStatus.PUBLISHED: {EventStatus.CANCELLED},
    EventStatus.CANCELLED: set(),
}


def _local_date(value: datetime, tz_name: str):
    return from_db(value).astimezone(get_zone(tz_name)).date()


class EventService:
    """Service for event operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _resolve_schedule(
        self,
        data: EventCreate | EventUpdate,
        tz_name: str,
        all_day: bool,
        current: Event | None = None,
    ) -> tuple[datetime, datetime]:
        """
        Work out the UTC start and end to store for a create or update payload.

        All-day events span whole calendar days in the event's timezone.
        Drafts created without a schedule start now and last two hours.
        """
        if all_day:
            start_date = data.start_date
            if start_date is None and data.start_datetime is not None:
                start_date = data.start_datetime.date()
            if start_date is None and current is not None:
                start_date = _local_date(current.start_datetime, tz_name)

            end_date = data.end_date
            if end_date is None and data.end_datetime is not None:
                end_date = data.end_datetime.date()
            if end_date is None and current is not None and current.is_all_day:
                end_date = _local_date(current.end_datetime - timedelta(microseconds=1), tz_name)

            if start_date is None:
                raise InvalidRequestError("All-day events need a start date")
            start, end = all_day_span(start_date, end_date, tz_name)
            return to_db(start), to_db(end)

        if data.start_datetime is not None:
            start = to_db(data.start_datetime, tz_name)
        elif current is not None:
            start = current.start_datetime
        else:
            start = to_db(utcnow())

        if data.end_datetime is not None:
            end = to_db(data.end_datetime, tz_name)
        elif current is not None:
            end = current.end_datetime
        else:
            end = start + DRAFT_DEFAULT_DURATION

        validate_range(from_db(start), from_db(end))
        return start, end

    def _check_publishable(self, event: Event) -> None:
        """Raise unless the event has everything a published event needs."""
        missing = []
        if not event.title:
            missing.append("title")
        if not event.description:
            missing.append("description")
        if event.capacity is None:
            missing.append("capacity")
        if missing:
            raise InvalidRequestError(
                f"Missing required fields for publishing: {', '.join(missing)}"
            )

    def _transition(self, event: Event, target: EventStatus) -> None:
        if target not in TRANSITIONS[event.status]:
            raise InvalidStatusTransitionError(
                f"Cannot change event from {event.status.value} to {target.value}"
            )
        event.status = target
        if target == EventStatus.PUBLISHED:
            event.published_at = to_db(utcnow())

    async def create_event(self, organizer_id: int, event_data: EventCreate) -> Event:
        """Create a new event as a draft, or publish it straight away."""
        if event_data.publish:
            has_start = event_data.start_datetime or event_data.start_date
            has_end = event_data.end_datetime or event_data.end_date or event_data.is_all_day
            if not has_start or not has_end:
                raise InvalidRequestError("Start and end date and time are required")

        tz_name = event_data.timezone or "UTC"
        get_zone(tz_name)
        start, end = self._resolve_schedule(event_data, tz_name, event_data.is_all_day)

        event = Event(
            title=event_data.title,
            description=event_data.description,
            short_description=event_data.short_description,
            start_datetime=start,
            end_datetime=end,
            timezone=tz_name,
            is_all_day=event_data.is_all_day,
            venue_id=event_data.venue_id,
            capacity=event_data.capacity,
            current_attendance=0,
            ticket_price=event_data.ticket_price,
            status=EventStatus.DRAFT,
            organizer_id=organizer_id,
            banner_image_url=event_data.banner_image_url or None,
            tags=[tag.strip() for tag in event_data.tags if tag.strip()] if event_data.tags else None,
        )
        if event_data.publish:
            self._check_publishable(event)
            self._transition(event, EventStatus.PUBLISHED)

        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"Event {event.event_id} created as {event.status.value}")
        return event

    async def get_event(self, event_id: int) -> Event | None:
        """Get event by ID."""
        result = await self.db.execute(
            select(Event).where(Event.event_id == event_id)
        )
        return result.scalar_one_or_none()

    async def require_event(self, event_id: int) -> Event:
        event = await self.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    async def get_visible_event(self, event_id: int, viewer_id: int | None = None) -> Event:
        """Drafts exist only for their organizer; anyone else gets not found."""
        event = await self.require_event(event_id)
        if event.status == EventStatus.DRAFT and event.organizer_id != viewer_id:
            raise NotFoundError("Event not found")
        return event

    async def _get_owned_event(self, event_id: int, organizer_id: int) -> Event:
        event = await self.require_event(event_id)
        if event.organizer_id != organizer_id:
            raise ForbiddenError("Only the organizer can change this event")
        return event

    async def get_events(
        self,
        page: int = 1,
        page_size: int = 20,
        upcoming_only: bool = False,
    ) -> tuple[list[Event], int]:
        """Get published events, soonest first."""
        query = select(Event).where(Event.status == EventStatus.PUBLISHED)

        if upcoming_only:
            query = query.where(Event.end_datetime > to_db(utcnow()))

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        # Get paginated results
        query = query.order_by(Event.start_datetime.asc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await self.db.execute(query)
        events = list(result.scalars().all())

        return events, total

    async def get_organizer_events(
        self,
        organizer_id: int,
        status: EventStatus | None = None,
    ) -> list[Event]:
        """Get an organizer's events, newest first."""
        query = select(Event).where(Event.organizer_id == organizer_id)
        if status:
            query = query.where(Event.status == status)
        query = query.order_by(Event.created_at.desc(), Event.event_id.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_event(
        self,
        event_id: int,
        organizer_id: int,
        event_data: EventUpdate,
    ) -> Event:
        """Update an event the organizer owns."""
        event = await self._get_owned_event(event_id, organizer_id)
        if event.status == EventStatus.CANCELLED:
            raise InvalidStatusTransitionError("Cancelled events cannot be edited")

        update_data = event_data.model_dump(exclude_unset=True)
        schedule_fields = {
            "start_datetime", "end_datetime", "start_date", "end_date", "timezone", "is_all_day"
        }

        if schedule_fields & update_data.keys():
            tz_name = event_data.timezone or event.timezone
            get_zone(tz_name)
            all_day = event.is_all_day if event_data.is_all_day is None else event_data.is_all_day
            start, end = self._resolve_schedule(event_data, tz_name, all_day, current=event)
            event.start_datetime = start
            event.end_datetime = end
            event.timezone = tz_name
            event.is_all_day = all_day

        for field, value in update_data.items():
            if field in schedule_fields or (field == "title" and value is None):
                continue
            setattr(event, field, value)

        if event.capacity is not None and event.capacity < event.current_attendance:
            raise BusinessRuleError(
                f"Capacity cannot be lower than the {event.current_attendance} tickets already sold"
            )
        if event.status == EventStatus.PUBLISHED:
            self._check_publishable(event)

        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def publish_event(self, event_id: int, organizer_id: int) -> Event:
        """Publish a draft once its required fields are filled."""
        event = await self._get_owned_event(event_id, organizer_id)
        self._check_publishable(event)
        self._transition(event, EventStatus.PUBLISHED)

        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"Event {event_id} published")
        return event

    async def cancel_event(self, event_id: int, organizer_id: int) -> Event:
        """Cancel an event; cancelled events no longer block their venue."""
        event = await self._get_owned_event(event_id, organizer_id)
        self._transition(event, EventStatus.CANCELLED)

        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"Event {event_id} cancelled")
        return event

    async def delete_draft(self, event_id: int, organizer_id: int) -> None:
        """Delete an event that was never published."""
        event = await self._get_owned_event(event_id, organizer_id)
        if event.status != EventStatus.DRAFT:
            raise InvalidStatusTransitionError("Only draft events can be deleted")

        await self.db.delete(event)
        await self.db.commit()

    async def reserve_attendance(self, event_id: int, quantity: int) -> bool:
        """
        Add ``quantity`` to the attendance count if it still fits the capacity.

        Runs as a single conditional UPDATE so concurrent confirmations cannot
        push attendance past capacity. Does not commit.

        Returns:
            True if the row was updated, False if capacity is exhausted.
        """
        result = await self.db.execute(
            update(Event)
            .where(
                Event.event_id == event_id,
                Event.capacity.is_not(None),
                Event.current_attendance + quantity <= Event.capacity,
            )
            .values(current_attendance=Event.current_attendance + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
