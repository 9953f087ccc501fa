"""Domain Services."""

from apps.venue_map.domain.services.distance import (
    EARTH_RADIUS_KM,
    VenueWithDistance,
    annotate_distances,
    format_distance,
    haversine_km,
)

__all__ = [
    "EARTH_RADIUS_KM",
    "VenueWithDistance",
    "annotate_distances",
    "format_distance",
    "haversine_km",
]
