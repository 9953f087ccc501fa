"""Domain Exceptions."""

from apps.venue_map.domain.exceptions.base import VenueMapError
from apps.venue_map.domain.exceptions.catalog import (
    CuratedStoreUnavailableError,
    InvalidRatingError,
    VenueSubmissionError,
)
from apps.venue_map.domain.exceptions.search import (
    ExternalIndexUnavailableError,
    InvalidSearchRadiusError,
)

__all__ = [
    "VenueMapError",
    "CuratedStoreUnavailableError",
    "InvalidRatingError",
    "VenueSubmissionError",
    "ExternalIndexUnavailableError",
    "InvalidSearchRadiusError",
]
