"""Application Ports."""

from apps.venue_map.application.nearby.ports.change_feed import (
    CHANGE_OP_DELETE,
    CHANGE_OP_INSERT,
    CHANGE_OP_UPDATE,
    ChangeCallback,
    ChangeFeedPort,
    ChangePublisherPort,
    Subscription,
)
from apps.venue_map.application.nearby.ports.curated_store import CuratedStorePort
from apps.venue_map.application.nearby.ports.external_index import ExternalIndexClientPort

__all__ = [
    "CHANGE_OP_DELETE",
    "CHANGE_OP_INSERT",
    "CHANGE_OP_UPDATE",
    "ChangeCallback",
    "ChangeFeedPort",
    "ChangePublisherPort",
    "CuratedStorePort",
    "ExternalIndexClientPort",
    "Subscription",
]
