"""Application Services."""

from apps.venue_map.application.nearby.services.aggregation_engine import AggregationEngine
from apps.venue_map.application.nearby.services.geo_query_builder import (
    GeoQueryBuilder,
    OverpassQuery,
    TagClause,
)
from apps.venue_map.application.nearby.services.tag_classifier import TagClassifier
from apps.venue_map.application.nearby.services.venue_merger import merge_slices, order_curated

__all__ = [
    "AggregationEngine",
    "GeoQueryBuilder",
    "OverpassQuery",
    "TagClause",
    "TagClassifier",
    "merge_slices",
    "order_curated",
]
