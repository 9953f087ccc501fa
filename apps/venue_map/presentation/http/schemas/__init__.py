"""HTTP Schemas."""

from apps.venue_map.presentation.http.schemas.common import ErrorResponse, HealthResponse
from apps.venue_map.presentation.http.schemas.venue import (
    DiagnosticsEntry,
    LiveViewRequest,
    NearbyVenuesResponse,
    RatingRequest,
    VenueEntry,
    VenueSubmissionRequest,
)

__all__ = [
    "DiagnosticsEntry",
    "ErrorResponse",
    "HealthResponse",
    "LiveViewRequest",
    "NearbyVenuesResponse",
    "RatingRequest",
    "VenueEntry",
    "VenueSubmissionRequest",
]
