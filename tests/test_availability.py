"""Venue availability tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from dorehami.exceptions import InvalidRequestError
from dorehami.models import EventStatus
from dorehami.services.availability_service import AvailabilityService
from dorehami.services.venue_directory import VenueDirectory, venue_directory

UTC = timezone.utc


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2030, 6, 1, hour, minute, tzinfo=UTC)


@pytest.fixture
def availability(session_factory):
    return AvailabilityService(session_factory)


@pytest.fixture
async def evening_event(organizer, make_event):
    # 18:00-21:00 at the Grand Ballroom
    return await make_event(organizer, title="Evening Gala", venue_id=1)


class TestCheckVenue:
    async def test_free_venue(self, availability):
        result = await availability.check_venue(1, at(10), at(12))

        assert result.venue_id == 1
        assert result.is_available is True
        assert result.conflicting_events == []

    async def test_overlap_reports_conflict(self, availability, evening_event):
        result = await availability.check_venue(1, at(20), at(23))

        assert result.is_available is False
        assert len(result.conflicting_events) == 1
        conflict = result.conflicting_events[0]
        assert conflict.id == evening_event.event_id
        assert conflict.title == "Evening Gala"
        assert conflict.start == at(18)
        assert conflict.end == at(21)

    async def test_contained_range_conflicts(self, availability, evening_event):
        result = await availability.check_venue(1, at(19), at(20))
        assert result.is_available is False

    async def test_touching_ranges_do_not_conflict(self, availability, evening_event):
        before = await availability.check_venue(1, at(15), at(18))
        after = await availability.check_venue(1, at(21), at(23))

        assert before.is_available is True
        assert after.is_available is True

    async def test_one_minute_overlap_conflicts(self, availability, evening_event):
        result = await availability.check_venue(1, at(20, 59), at(23))
        assert result.is_available is False

    async def test_other_venue_unaffected(self, availability, evening_event):
        result = await availability.check_venue(2, at(18), at(21))
        assert result.is_available is True

    async def test_cancelled_event_never_conflicts(self, availability, organizer, make_event):
        await make_event(organizer, venue_id=1, status=EventStatus.CANCELLED)

        result = await availability.check_venue(1, at(18), at(21))

        assert result.is_available is True

    async def test_draft_event_conflicts(self, availability, organizer, make_event):
        await make_event(organizer, venue_id=1, status=EventStatus.DRAFT)

        result = await availability.check_venue(1, at(18), at(21))

        assert result.is_available is False

    async def test_excluded_event_is_ignored(self, availability, evening_event):
        result = await availability.check_venue(
            1, at(18), at(21), exclude_event_id=evening_event.event_id
        )
        assert result.is_available is True

    async def test_exclusion_keeps_other_conflicts(self, availability, organizer, make_event):
        first = await make_event(organizer, venue_id=1)
        second = await make_event(organizer, venue_id=1, start=datetime(2030, 6, 1, 20, 0))

        result = await availability.check_venue(1, at(18), at(21), exclude_event_id=first.event_id)

        assert [c.id for c in result.conflicting_events] == [second.event_id]

    async def test_non_utc_input_is_normalised(self, availability, evening_event):
        # 14:00-15:00 in New York is 18:00-19:00 UTC in June
        new_york = timezone(timedelta(hours=-4))
        start = datetime(2030, 6, 1, 14, 0, tzinfo=new_york)

        result = await availability.check_venue(1, start, start + timedelta(hours=1))

        assert result.is_available is False

    async def test_unknown_venue_is_unavailable(self, availability):
        result = await availability.check_venue(99, at(10), at(12))

        assert result.venue_id == 99
        assert result.is_available is False
        assert result.conflicting_events == []

    @pytest.mark.parametrize("start,end", [(at(12), at(12)), (at(12), at(10))])
    async def test_invalid_range_raises(self, availability, start, end):
        with pytest.raises(InvalidRequestError, match="End date and time must be after"):
            await availability.check_venue(1, start, end)


class TestCheckAllVenues:
    async def test_one_result_per_venue(self, availability, evening_event):
        results = await availability.check_all_venues(at(19), at(20))

        assert [r.venue_id for r in results] == venue_directory.venue_ids()
        by_venue = {r.venue_id: r for r in results}
        assert by_venue[1].is_available is False
        assert by_venue[2].is_available is True
        assert by_venue[3].is_available is True

    async def test_failed_venue_is_unavailable(self, availability):
        original = availability.find_conflicts

        async def flaky(db, venue_id, *args, **kwargs):
            if venue_id == 2:
                raise RuntimeError("connection reset")
            return await original(db, venue_id, *args, **kwargs)

        with patch.object(availability, "find_conflicts", side_effect=flaky):
            results = await availability.check_all_venues(at(10), at(12))

        assert len(results) == 3
        by_venue = {r.venue_id: r for r in results}
        assert by_venue[1].is_available is True
        assert by_venue[2].is_available is False
        assert by_venue[2].conflicting_events == []
        assert by_venue[3].is_available is True

    async def test_custom_directory(self, session_factory):
        directory = VenueDirectory(venue_directory.list_venues()[:1])
        service = AvailabilityService(session_factory, directory)

        results = await service.check_all_venues(at(10), at(12))

        assert [r.venue_id for r in results] == [1]

    async def test_invalid_range_raises(self, availability):
        with pytest.raises(InvalidRequestError):
            await availability.check_all_venues(at(12), at(11))
