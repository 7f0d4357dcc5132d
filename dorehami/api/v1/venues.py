"""Venues API endpoints."""

from fastapi import APIRouter

from dorehami.api.v1.dependencies import VenueDirectoryDep
from dorehami.exceptions import NotFoundError
from dorehami.schemas.venue import MenuResponse, Venue

router = APIRouter()


@router.get(
    "",
    response_model=list[Venue],
    summary="List venues",
)
async def list_venues(venues: VenueDirectoryDep) -> list[Venue]:
    return venues.list_venues()


@router.get(
    "/{venue_id}",
    response_model=Venue,
    summary="Get venue details",
)
async def get_venue(venue_id: int, venues: VenueDirectoryDep) -> Venue:
    venue = venues.get_venue(venue_id)
    if not venue:
        raise NotFoundError("Venue not found")
    return venue


@router.get(
    "/{venue_id}/menu",
    response_model=MenuResponse,
    summary="Get catering menu",
)
async def get_menu(venue_id: int, venues: VenueDirectoryDep) -> MenuResponse:
    """Get the catering menu link of a venue that offers catering."""
    venue = venues.get_venue(venue_id)
    if not venue:
        raise NotFoundError("Venue not found")
    if not venue.catering or not venue.menu_link:
        raise NotFoundError("Venue does not offer catering")
    return MenuResponse(venue_id=venue.venue_id, name=venue.name, menu_link=venue.menu_link)
