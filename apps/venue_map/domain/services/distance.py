"""Distance Service.

Haversine 공식 기반 대원 거리 계산. 순수 함수만 포함합니다.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from apps.venue_map.domain.entities import Venue
from apps.venue_map.domain.value_objects import Coordinates

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """두 좌표 사이의 거리(km)."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # 부동소수점 오차로 1을 살짝 넘는 경우 방지
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def format_distance(distance_km: float) -> str:
    """거리 표시 문자열 (1km 미만은 m 단위)."""
    if distance_km < 1:
        return f"{int(round(distance_km * 1000))}m"
    return f"{distance_km:.1f}km"


@dataclass(frozen=True)
class VenueWithDistance:
    """렌더링 시점에 계산된 사용자 거리 포함 Venue."""

    venue: Venue
    distance_km: float

    @property
    def distance_text(self) -> str:
        return format_distance(self.distance_km)


def annotate_distances(venues: Iterable[Venue], user_location: Coordinates) -> list[VenueWithDistance]:
    """순서를 유지한 채 각 Venue에 사용자 거리를 붙입니다. 저장하지 않습니다."""
    return [
        VenueWithDistance(venue=venue, distance_km=haversine_km(user_location, venue.location))
        for venue in venues
    ]
