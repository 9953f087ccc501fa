"""In-Memory Infrastructure."""

from apps.venue_map.infrastructure.persistence_memory.curated_store_memory import (
    InMemoryCuratedStore,
)

__all__ = ["InMemoryCuratedStore"]
