"""Application DTOs."""

from apps.venue_map.application.nearby.dto.fetch_results import (
    CuratedSearchResult,
    ExternalFetchResult,
)
from apps.venue_map.application.nearby.dto.snapshot import (
    OUTCOME_DEGRADED,
    OUTCOME_EMPTY,
    OUTCOME_OK,
    AggregationSnapshot,
    AggregationState,
    LoadDiagnostics,
)

__all__ = [
    "AggregationSnapshot",
    "AggregationState",
    "CuratedSearchResult",
    "ExternalFetchResult",
    "LoadDiagnostics",
    "OUTCOME_DEGRADED",
    "OUTCOME_EMPTY",
    "OUTCOME_OK",
]
