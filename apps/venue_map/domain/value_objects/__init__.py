"""Domain Value Objects."""

from apps.venue_map.domain.value_objects.coordinates import Coordinates

__all__ = ["Coordinates"]
