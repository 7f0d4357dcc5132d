"""Venue availability service."""

import asyncio
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dorehami.models.event import Event, EventStatus
from dorehami.schemas.venue import ConflictingEvent, VenueAvailability
from dorehami.services.venue_directory import VenueDirectory, venue_directory
from dorehami.timeutils import to_db, validate_range

logger = logging.getLogger(__name__)


class AvailabilityService:
    """
    Service answering whether a venue is free over a proposed time range.

    Two events conflict iff ``existing.start < proposed.end AND
    existing.end > proposed.start``: ranges are half-open, so an event ending
    exactly when another starts does not conflict. Cancelled events never
    conflict.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        venues: VenueDirectory = venue_directory,
    ):
        self.session_factory = session_factory
        self.venues = venues

    async def find_conflicts(
        self,
        db: AsyncSession,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: int | None = None,
    ) -> list[Event]:
        """Get non-cancelled events at a venue overlapping [start, end)."""
        query = select(Event).where(
            Event.venue_id == venue_id,
            Event.status != EventStatus.CANCELLED,
            Event.start_datetime < to_db(end),
            Event.end_datetime > to_db(start),
        )
        if exclude_event_id is not None:
            query = query.where(Event.event_id != exclude_event_id)
        query = query.order_by(Event.start_datetime)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def _check(
        self,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: int | None,
    ) -> VenueAvailability:
        if self.venues.get_venue(venue_id) is None:
            logger.warning(f"Availability requested for unknown venue {venue_id}")
            return VenueAvailability(venue_id=venue_id, is_available=False)

        async with self.session_factory() as db:
            conflicts = await self.find_conflicts(db, venue_id, start, end, exclude_event_id)

        return VenueAvailability(
            venue_id=venue_id,
            is_available=not conflicts,
            conflicting_events=[ConflictingEvent.model_validate(e) for e in conflicts],
        )

    async def check_venue(
        self,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: int | None = None,
    ) -> VenueAvailability:
        """
        Check one venue.

        Args:
            venue_id: Venue to check
            start: Proposed start
            end: Proposed end
            exclude_event_id: Event being edited, left out of its own conflicts

        Returns:
            Availability result; an unknown venue is reported unavailable with
            no conflicts rather than raising.

        Raises:
            InvalidRequestError: If start is not before end
        """
        validate_range(start, end)
        return await self._check(venue_id, start, end, exclude_event_id)

    async def check_all_venues(
        self,
        start: datetime,
        end: datetime,
        exclude_event_id: int | None = None,
    ) -> list[VenueAvailability]:
        """
        Check every venue in the directory concurrently.

        Returns exactly one result per venue in directory order. A venue whose
        check fails is reported unavailable (fail-closed) without affecting
        the others.
        """
        validate_range(start, end)
        venue_ids = self.venues.venue_ids()

        results = await asyncio.gather(
            *(self._check(venue_id, start, end, exclude_event_id) for venue_id in venue_ids),
            return_exceptions=True,
        )

        availability = []
        for venue_id, result in zip(venue_ids, results):
            if isinstance(result, BaseException):
                logger.error(
                    f"Availability check failed for venue {venue_id}: {result}",
                    exc_info=result,
                )
                availability.append(VenueAvailability(venue_id=venue_id, is_available=False))
            else:
                availability.append(result)
        return availability
