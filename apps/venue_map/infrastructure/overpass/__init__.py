"""Overpass (OpenStreetMap) Infrastructure."""

from apps.venue_map.infrastructure.overpass.client import OverpassClient, build_http_client
from apps.venue_map.infrastructure.overpass.parser import parse_elements

__all__ = ["OverpassClient", "build_http_client", "parse_elements"]
