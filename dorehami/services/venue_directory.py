"""Static venue catalog."""

from dorehami.schemas.venue import Venue, VenueImage, VenueType

VENUES: tuple[Venue, ...] = (
    Venue(
        venue_id=1,
        name="Grand Ballroom",
        capacity=500,
        type=VenueType.INDOOR,
        catering=True,
        menu_link="/menus/grand-ballroom.pdf",
        images=[
            VenueImage(url="/venues/grand-ballroom-1.jpg", alt="Grand Ballroom Main Hall"),
            VenueImage(url="/venues/grand-ballroom-2.jpg", alt="Grand Ballroom Stage Area"),
        ],
    ),
    Venue(
        venue_id=2,
        name="Garden Terrace",
        capacity=200,
        type=VenueType.OUTDOOR,
        catering=True,
        menu_link="/menus/garden-terrace.pdf",
        images=[
            VenueImage(url="/venues/garden-terrace-1.jpg", alt="Garden Terrace Overview"),
            VenueImage(url="/venues/garden-terrace-2.jpg", alt="Garden Terrace Seating Area"),
        ],
    ),
    Venue(
        venue_id=3,
        name="Conference Hall",
        capacity=300,
        type=VenueType.INDOOR,
        catering=False,
        images=[
            VenueImage(url="/venues/conference-hall-1.jpg", alt="Conference Hall Main View"),
        ],
    ),
)


class VenueDirectory:
    """Read-only lookup over a fixed set of venues."""

    def __init__(self, venues: tuple[Venue, ...] | list[Venue] = VENUES):
        self._venues = tuple(venues)
        self._by_id = {venue.venue_id: venue for venue in self._venues}

    def list_venues(self) -> list[Venue]:
        return list(self._venues)

    def get_venue(self, venue_id: int) -> Venue | None:
        return self._by_id.get(venue_id)

    def venue_ids(self) -> list[int]:
        return [venue.venue_id for venue in self._venues]


# Global instance
venue_directory = VenueDirectory()
