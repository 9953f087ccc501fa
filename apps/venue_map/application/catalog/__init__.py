"""Curated Catalog Rules."""

from apps.venue_map.application.catalog.seed import SEED_VENUES, filter_seed_venues
from apps.venue_map.application.catalog.submission import (
    build_submitted_venue,
    place_within,
    running_average,
    validate_submission,
)

__all__ = [
    "SEED_VENUES",
    "build_submitted_venue",
    "filter_seed_venues",
    "place_within",
    "running_average",
    "validate_submission",
]
