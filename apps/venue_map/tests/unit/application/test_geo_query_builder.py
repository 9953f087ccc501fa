"""GeoQueryBuilder 테스트."""

from __future__ import annotations

import pytest

from apps.venue_map.application.nearby.services.geo_query_builder import (
    ALL_CLAUSES,
    CATEGORY_CLAUSES,
    GeoQueryBuilder,
    TagClause,
)
from apps.venue_map.domain.enums import ALL, VenueCategory
from apps.venue_map.domain.exceptions import InvalidSearchRadiusError
from apps.venue_map.domain.value_objects import Coordinates

CENTER = Coordinates(41.0082, 28.9784)


class TestGeoQueryBuilder:
    @pytest.fixture
    def builder(self) -> GeoQueryBuilder:
        return GeoQueryBuilder()

    def test_every_category_has_one_to_four_clauses(self):
        assert set(CATEGORY_CLAUSES) == set(VenueCategory)
        for clauses in CATEGORY_CLAUSES.values():
            assert 1 <= len(clauses) <= 4

    def test_all_is_subset_of_category_clauses(self):
        """All 은 대표 시설 6종의 명시적 합집합."""
        every_clause = {clause for clauses in CATEGORY_CLAUSES.values() for clause in clauses}
        every_clause.add(TagClause("leisure", "sports_centre"))
        assert len(ALL_CLAUSES) == 6
        assert set(ALL_CLAUSES) <= every_clause

    def test_build_renders_overpass_ql(self, builder: GeoQueryBuilder):
        query = builder.build(VenueCategory.GYM, CENTER, 5000)

        assert query.to_ql() == (
            "[out:json][timeout:25];\n"
            "(\n"
            '  nwr["leisure"="fitness_centre"](around:5000,41.0082,28.9784);\n'
            '  nwr["sport"="fitness"](around:5000,41.0082,28.9784);\n'
            ");\n"
            "out center tags;"
        )

    def test_build_all_uses_union_clauses(self, builder: GeoQueryBuilder):
        query = builder.build(ALL, CENTER)

        assert query.clauses == ALL_CLAUSES
        assert query.radius_m == 5000
        assert query.to_ql().count("nwr[") == 6

    def test_custom_server_timeout(self):
        query = GeoQueryBuilder(server_timeout_s=10).build(VenueCategory.POOL, CENTER, 1000)
        assert query.to_ql().startswith("[out:json][timeout:10];")

    @pytest.mark.parametrize("radius", [0, -1])
    def test_rejects_non_positive_radius(self, builder: GeoQueryBuilder, radius: int):
        with pytest.raises(InvalidSearchRadiusError):
            builder.build(VenueCategory.GYM, CENTER, radius)
