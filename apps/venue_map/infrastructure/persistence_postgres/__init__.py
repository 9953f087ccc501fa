"""PostgreSQL Infrastructure."""

from apps.venue_map.infrastructure.persistence_postgres.curated_store_sqla import (
    SqlaCuratedStore,
)
from apps.venue_map.infrastructure.persistence_postgres.models import (
    Base,
    CuratedVenueModel,
)
from apps.venue_map.infrastructure.persistence_postgres.session import (
    build_engine,
    build_session_factory,
)

__all__ = [
    "Base",
    "CuratedVenueModel",
    "SqlaCuratedStore",
    "build_engine",
    "build_session_factory",
]
