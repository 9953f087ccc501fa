"""Geo Query Builder.

카테고리 필터 + 중심 좌표 + 반경을 Overpass QL 쿼리로 변환합니다.
Port 의존성이 없는 순수 로직입니다.
"""

from __future__ import annotations

from dataclasses import dataclass

from apps.venue_map.domain.enums import ALL, CategoryFilter, VenueCategory
from apps.venue_map.domain.exceptions import InvalidSearchRadiusError
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.setup.constants import DEFAULT_RADIUS_METERS

DEFAULT_SERVER_TIMEOUT_SECONDS = 25


@dataclass(frozen=True)
class TagClause:
    """단일 태그 매칭 절 (``["key"="value"]``)."""

    key: str
    value: str

    def to_ql(self) -> str:
        return f'["{self.key}"="{self.value}"]'


def _clauses(*pairs: tuple[str, str]) -> tuple[TagClause, ...]:
    return tuple(TagClause(key, value) for key, value in pairs)


# 같은 개념이 여러 태그로 기록되므로 카테고리당 1~4개의 대안 절을 OR 결합
CATEGORY_CLAUSES: dict[VenueCategory, tuple[TagClause, ...]] = {
    VenueCategory.GYM: _clauses(("leisure", "fitness_centre"), ("sport", "fitness")),
    VenueCategory.PARK: _clauses(("leisure", "park"), ("leisure", "fitness_station")),
    VenueCategory.COURT: _clauses(("leisure", "pitch"), ("leisure", "sports_hall")),
    VenueCategory.POOL: _clauses(
        ("leisure", "swimming_pool"),
        ("sport", "swimming"),
        ("leisure", "water_park"),
    ),
    VenueCategory.SALON: _clauses(("amenity", "spa"), ("shop", "massage"), ("leisure", "sauna")),
    VenueCategory.ROUTE: _clauses(("route", "running"), ("route", "hiking"), ("highway", "footway")),
    VenueCategory.STADIUM: _clauses(("leisure", "stadium"), ("building", "stadium")),
    VenueCategory.YOGA: _clauses(("sport", "yoga"), ("amenity", "yoga")),
    VenueCategory.BOXING: _clauses(("sport", "boxing"), ("sport", "kickboxing")),
    VenueCategory.DANCE: _clauses(("leisure", "dance"), ("sport", "dance"), ("amenity", "dancing_school")),
    VenueCategory.MARTIAL_ARTS: _clauses(
        ("amenity", "dojo"),
        ("sport", "martial_arts"),
        ("sport", "karate"),
        ("sport", "judo"),
    ),
    VenueCategory.CLIMBING: _clauses(("sport", "climbing"), ("sport", "bouldering")),
    VenueCategory.TENNIS: _clauses(("sport", "tennis"), ("sport", "table_tennis"), ("sport", "padel")),
    VenueCategory.BASKETBALL: _clauses(("sport", "basketball"),),
    VenueCategory.FOOTBALL: _clauses(("sport", "soccer"), ("sport", "american_football")),
    VenueCategory.VOLLEYBALL: _clauses(("sport", "volleyball"), ("sport", "beachvolleyball")),
    VenueCategory.GOLF: _clauses(("leisure", "golf_course"), ("sport", "golf"), ("golf", "driving_range")),
    VenueCategory.SKATE: _clauses(("sport", "skateboard"), ("leisure", "ice_rink")),
    VenueCategory.TRACK: _clauses(("leisure", "track"), ("sport", "running"), ("sport", "athletics")),
    VenueCategory.CYCLING: _clauses(("highway", "cycleway"), ("sport", "cycling"), ("route", "bicycle")),
    VenueCategory.BEACH: _clauses(("natural", "beach"), ("leisure", "beach_resort")),
    VenueCategory.CROSSFIT: _clauses(("sport", "crossfit"),),
}

# 'All' 은 22개 카테고리 전체가 아니라 대표 시설 6종의 합집합 (정밀도 우선)
ALL_CLAUSES: tuple[TagClause, ...] = _clauses(
    ("leisure", "fitness_centre"),
    ("leisure", "sports_centre"),
    ("leisure", "pitch"),
    ("leisure", "swimming_pool"),
    ("leisure", "park"),
    ("leisure", "stadium"),
)


@dataclass(frozen=True)
class OverpassQuery:
    """외부 인덱스 질의 기술자."""

    clauses: tuple[TagClause, ...]
    center: Coordinates
    radius_m: int
    server_timeout_s: int = DEFAULT_SERVER_TIMEOUT_SECONDS

    def to_ql(self) -> str:
        """Overpass QL 텍스트로 렌더링합니다."""
        around = f"(around:{self.radius_m},{self.center.latitude},{self.center.longitude})"
        lines = [f"[out:json][timeout:{self.server_timeout_s}];", "("]
        lines.extend(f"  nwr{clause.to_ql()}{around};" for clause in self.clauses)
        lines.append(");")
        lines.append("out center tags;")
        return "\n".join(lines)


class GeoQueryBuilder:
    """카테고리 필터를 외부 인덱스 쿼리로 변환."""

    def __init__(self, server_timeout_s: int = DEFAULT_SERVER_TIMEOUT_SECONDS) -> None:
        self._server_timeout_s = server_timeout_s

    @staticmethod
    def clauses_for(category_filter: CategoryFilter) -> tuple[TagClause, ...]:
        if category_filter == ALL:
            return ALL_CLAUSES
        return CATEGORY_CLAUSES[VenueCategory(category_filter)]

    def build(
        self,
        category_filter: CategoryFilter,
        center: Coordinates,
        radius_m: int = DEFAULT_RADIUS_METERS,
    ) -> OverpassQuery:
        """쿼리 생성.

        Raises:
            InvalidSearchRadiusError: radius_m <= 0
        """
        if radius_m <= 0:
            raise InvalidSearchRadiusError(radius_m)
        return OverpassQuery(
            clauses=self.clauses_for(category_filter),
            center=center,
            radius_m=int(radius_m),
            server_timeout_s=self._server_timeout_s,
        )
