"""Domain Entities."""

from apps.venue_map.domain.entities.venue import (
    EXTERNAL_ID_PREFIX,
    SEED_ID_PREFIX,
    Venue,
    VenueSubmission,
    curated_order_key,
)

__all__ = [
    "EXTERNAL_ID_PREFIX",
    "SEED_ID_PREFIX",
    "Venue",
    "VenueSubmission",
    "curated_order_key",
]
