"""Realtime Change Feed Infrastructure."""

from apps.venue_map.infrastructure.realtime.memory_change_feed import InMemoryChangeFeed
from apps.venue_map.infrastructure.realtime.redis_change_feed import (
    DEFAULT_CHANGE_CHANNEL,
    RedisChangeFeed,
    RedisChangePublisher,
)

__all__ = [
    "DEFAULT_CHANGE_CHANNEL",
    "InMemoryChangeFeed",
    "RedisChangeFeed",
    "RedisChangePublisher",
]
