"""Venue Entity."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from apps.venue_map.domain.enums import ALL, CategoryFilter, VenueCategory, VenueSource
from apps.venue_map.domain.value_objects import Coordinates

MIN_RATING = 0.0
MAX_RATING = 5.0

EXTERNAL_ID_PREFIX = "ext-"
SEED_ID_PREFIX = "seed-"


@dataclass(frozen=True)
class Venue:
    """운동 장소.

    id는 출처별 네임스페이스를 가집니다 (external: ``ext-``, seed: ``seed-``,
    curated: 저장소 UUID). 하나의 집계 결과 안에서 id는 유일합니다.
    """

    id: str
    name: str
    category: VenueCategory
    location: Coordinates
    source: VenueSource
    rating: float = 0.0
    review_count: int = 0
    description: str = ""
    image_url: str = ""
    verified: bool = False
    sponsored: bool = False
    address: str | None = None
    contact_phone: str | None = None
    website: str | None = None
    hours: str | None = None
    amenity_tags: tuple[str, ...] = field(default_factory=tuple)
    submitted_by: str | None = None

    def __post_init__(self) -> None:
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValueError(f"Invalid rating: {self.rating}")
        if self.review_count < 0:
            raise ValueError(f"Invalid review_count: {self.review_count}")

    def matches(self, category_filter: CategoryFilter = ALL, search_text: str | None = None) -> bool:
        """카테고리 필터와 검색어(이름/설명 부분 일치)에 해당하는지 확인."""
        if category_filter != ALL and self.category != category_filter:
            return False
        if search_text:
            needle = search_text.strip().lower()
            if needle and needle not in self.name.lower() and needle not in self.description.lower():
                return False
        return True

    def with_rating(self, rating: float, review_count: int) -> Venue:
        return replace(self, rating=rating, review_count=review_count)


@dataclass(frozen=True)
class VenueSubmission:
    """사용자 제출 장소 (검수 전).

    승인 시 ``verified=False, sponsored=False, rating=0`` 상태의 Venue가 됩니다.
    """

    name: str
    category: VenueCategory
    description: str
    area_center: Coordinates
    submitter_id: str
    address: str | None = None
    contact_info: str | None = None


def curated_order_key(venue: Venue) -> tuple[bool, float]:
    """큐레이션 정렬 키: sponsored desc, rating desc (``sorted(..., key=...)``용)."""
    return (not venue.sponsored, -venue.rating)
