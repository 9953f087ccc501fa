"""Venue Category Enum."""

from __future__ import annotations

from enum import Enum
from typing import Final, Literal, Union


class VenueCategory(str, Enum):
    """운동 장소 카테고리 (저장 가능한 닫힌 집합)."""

    GYM = "gym"
    PARK = "park"
    COURT = "court"
    POOL = "pool"
    SALON = "salon"
    ROUTE = "route"
    STADIUM = "stadium"
    YOGA = "yoga"
    BOXING = "boxing"
    DANCE = "dance"
    MARTIAL_ARTS = "martial_arts"
    CLIMBING = "climbing"
    TENNIS = "tennis"
    BASKETBALL = "basketball"
    FOOTBALL = "football"
    VOLLEYBALL = "volleyball"
    GOLF = "golf"
    SKATE = "skate"
    TRACK = "track"
    CYCLING = "cycling"
    BEACH = "beach"
    CROSSFIT = "crossfit"

    @property
    def label(self) -> str:
        """UI 표시용 이름."""
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[VenueCategory, str] = {
    VenueCategory.GYM: "Gym",
    VenueCategory.PARK: "Park",
    VenueCategory.COURT: "Court",
    VenueCategory.POOL: "Pool",
    VenueCategory.SALON: "Salon",
    VenueCategory.ROUTE: "Route",
    VenueCategory.STADIUM: "Stadium",
    VenueCategory.YOGA: "Yoga Studio",
    VenueCategory.BOXING: "Boxing Gym",
    VenueCategory.DANCE: "Dance Studio",
    VenueCategory.MARTIAL_ARTS: "Martial Arts",
    VenueCategory.CLIMBING: "Climbing Wall",
    VenueCategory.TENNIS: "Tennis Court",
    VenueCategory.BASKETBALL: "Basketball Court",
    VenueCategory.FOOTBALL: "Football Field",
    VenueCategory.VOLLEYBALL: "Volleyball Court",
    VenueCategory.GOLF: "Golf Course",
    VenueCategory.SKATE: "Skate Park",
    VenueCategory.TRACK: "Running Track",
    VenueCategory.CYCLING: "Cycling Path",
    VenueCategory.BEACH: "Beach",
    VenueCategory.CROSSFIT: "CrossFit Box",
}

# 필터 전용 의사 카테고리 - 저장된 Venue의 카테고리로는 절대 쓰이지 않음
ALL: Final = "All"

CategoryFilter = Union[VenueCategory, Literal["All"]]


def parse_category_filter(raw: str | None) -> CategoryFilter:
    """문자열을 카테고리 필터로 변환합니다.

    enum value, member name, label 모두 대소문자 무관하게 허용합니다.
    비어 있으면 ALL 입니다.

    Raises:
        ValueError: 알 수 없는 카테고리
    """
    if raw is None or not raw.strip() or raw.strip().lower() == ALL.lower():
        return ALL
    needle = raw.strip().lower()
    for category in VenueCategory:
        if needle in (category.value, category.name.lower(), category.label.lower()):
            return category
    raise ValueError(f"Unknown venue category: {raw}")
