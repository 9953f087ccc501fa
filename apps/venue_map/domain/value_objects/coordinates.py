"""Coordinates Value Object."""

from __future__ import annotations

import math
from dataclasses import dataclass

# 위도 1도당 거리 (meters, 구면 근사)
METERS_PER_DEGREE_LAT = 111_320.0


@dataclass(frozen=True)
class Coordinates:
    """위도/경도 좌표 (WGS84)."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """좌표 유효성 검증."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Invalid latitude: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Invalid longitude: {self.longitude}")

    def offset(self, north_m: float, east_m: float) -> Coordinates:
        """북/동 방향 미터 오프셋만큼 이동한 좌표를 반환합니다.

        짧은 거리(수 km 이내)용 평면 근사입니다. 결과는 유효 범위로 clamp 됩니다.
        """
        lat = self.latitude + north_m / METERS_PER_DEGREE_LAT
        cos_lat = math.cos(math.radians(self.latitude))
        lon_delta = east_m / (METERS_PER_DEGREE_LAT * cos_lat) if cos_lat > 1e-9 else 0.0
        lon = self.longitude + lon_delta
        lat = max(-90.0, min(90.0, lat))
        lon = max(-180.0, min(180.0, lon))
        return Coordinates(latitude=lat, longitude=lon)
