"""TagClassifier 테스트."""

from __future__ import annotations

import pytest

from apps.venue_map.application.nearby.services.tag_classifier import TagClassifier
from apps.venue_map.domain.enums import VenueCategory


class TestClassify:
    @pytest.mark.parametrize(
        ("tags", "expected"),
        [
            ({"sport": "yoga", "leisure": "fitness_centre"}, VenueCategory.YOGA),
            ({"sport": "unknown;boxing;tennis"}, VenueCategory.BOXING),
            ({"leisure": "swimming_pool"}, VenueCategory.POOL),
            ({"amenity": "dojo"}, VenueCategory.MARTIAL_ARTS),
            ({"natural": "beach"}, VenueCategory.BEACH),
            ({"highway": "cycleway"}, VenueCategory.CYCLING),
            ({"shop": "massage"}, VenueCategory.SALON),
            ({"route": "running"}, VenueCategory.ROUTE),
            ({"name": "CrossFit Gym Kadikoy"}, VenueCategory.CROSSFIT),
            ({"name": "Moda Yoga Evi"}, VenueCategory.YOGA),
            ({"name": "Something Unrelated"}, VenueCategory.GYM),
            ({}, VenueCategory.GYM),
        ],
    )
    def test_priority(self, tags, expected):
        assert TagClassifier.classify(tags) == expected

    def test_leisure_beats_amenity(self):
        """시설 태그는 고정 순서(leisure 먼저)로 평가."""
        tags = {"amenity": "spa", "leisure": "sports_hall"}
        assert TagClassifier.classify(tags) == VenueCategory.COURT

    def test_deterministic(self):
        tags = {"sport": "soccer;basketball", "leisure": "pitch", "name": "Arena"}
        results = {TagClassifier.classify(dict(tags)) for _ in range(50)}
        assert results == {VenueCategory.FOOTBALL}


class TestAmenityTags:
    def test_fixed_order(self):
        tags = {
            "sport": "tennis;padel",
            "surface": "clay",
            "lit": "yes",
            "fee": "no",
            "covered": "no",
        }
        assert TagClassifier.amenity_tags(tags) == ("Tennis", "Padel", "Lighting", "Free", "Clay")

    def test_empty(self):
        assert TagClassifier.amenity_tags({}) == ()
