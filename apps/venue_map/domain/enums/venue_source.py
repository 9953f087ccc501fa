"""Venue Source Enum."""

from enum import Enum


class VenueSource(str, Enum):
    """장소 데이터 출처."""

    EXTERNAL = "external"  # 공개 지리 인덱스 (OSM/Overpass)
    CURATED = "curated"  # 운영자 관리 카탈로그
    SEED = "seed"  # 내장 폴백 목록
