"""Venue Map test fixtures."""

from __future__ import annotations

from typing import Callable

import pytest

from apps.venue_map.domain.entities import Venue
from apps.venue_map.domain.enums import VenueCategory, VenueSource
from apps.venue_map.domain.value_objects import Coordinates

ISTANBUL = Coordinates(41.0082, 28.9784)

VenueFactory = Callable[..., Venue]


@pytest.fixture
def istanbul() -> Coordinates:
    return ISTANBUL


@pytest.fixture
def make_venue() -> VenueFactory:
    """Venue 생성 헬퍼 (필수값 기본 채움)."""

    def _make(
        venue_id: str,
        *,
        name: str | None = None,
        category: VenueCategory = VenueCategory.GYM,
        source: VenueSource = VenueSource.CURATED,
        rating: float = 4.0,
        review_count: int = 10,
        sponsored: bool = False,
        description: str = "",
        location: Coordinates = ISTANBUL,
    ) -> Venue:
        return Venue(
            id=venue_id,
            name=name or f"Venue {venue_id}",
            category=category,
            location=location,
            source=source,
            rating=rating,
            review_count=review_count,
            description=description,
            verified=source is not VenueSource.CURATED,
            sponsored=sponsored,
        )

    return _make
