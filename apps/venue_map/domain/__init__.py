"""Venue Map Domain Layer."""

from apps.venue_map.domain.entities import Venue, VenueSubmission
from apps.venue_map.domain.enums import ALL, CategoryFilter, VenueCategory, VenueSource
from apps.venue_map.domain.value_objects import Coordinates

__all__ = [
    "ALL",
    "CategoryFilter",
    "Coordinates",
    "Venue",
    "VenueCategory",
    "VenueSource",
    "VenueSubmission",
]
