"""Domain Enums."""

from apps.venue_map.domain.enums.venue_category import (
    ALL,
    CATEGORY_LABELS,
    CategoryFilter,
    VenueCategory,
    parse_category_filter,
)
from apps.venue_map.domain.enums.venue_source import VenueSource

__all__ = [
    "ALL",
    "CATEGORY_LABELS",
    "CategoryFilter",
    "VenueCategory",
    "VenueSource",
    "parse_category_filter",
]
