"""Overpass Response Parser.

Overpass JSON ``elements[]`` 를 Venue 로 정규화합니다.

- 이름 또는 좌표(lat/lon, center.lat/center.lon)가 없는 요소는 버림
- 동일 요소(type/id)는 호출 단위로 한 번만 채택 (먼저 온 것 유지)
"""

from __future__ import annotations

import logging
import random
from typing import Any, Iterable, Literal, Mapping

from apps.venue_map.application.nearby.services.tag_classifier import TagClassifier
from apps.venue_map.domain.entities import EXTERNAL_ID_PREFIX, Venue
from apps.venue_map.domain.enums import VenueCategory, VenueSource
from apps.venue_map.domain.value_objects import Coordinates

logger = logging.getLogger(__name__)

RatingPolicy = Literal["synthetic", "unrated"]

SYNTHETIC_RATING_RANGE = (3.5, 5.0)
SYNTHETIC_REVIEW_RANGE = (5, 200)

_UNSPLASH = "https://images.unsplash.com/{photo}?w=800&auto=format&fit=crop&q=60"

CATEGORY_IMAGES: dict[VenueCategory, str] = {
    VenueCategory.GYM: _UNSPLASH.format(photo="photo-1534438327276-14e5300c3a48"),
    VenueCategory.CROSSFIT: _UNSPLASH.format(photo="photo-1534438327276-14e5300c3a48"),
    VenueCategory.PARK: _UNSPLASH.format(photo="photo-1519125323398-675f0ddb6308"),
    VenueCategory.ROUTE: _UNSPLASH.format(photo="photo-1506197061617-7f5c0b093236"),
    VenueCategory.TRACK: _UNSPLASH.format(photo="photo-1506197061617-7f5c0b093236"),
    VenueCategory.COURT: _UNSPLASH.format(photo="photo-1622279457486-62dcc4a431d6"),
    VenueCategory.TENNIS: _UNSPLASH.format(photo="photo-1622279457486-62dcc4a431d6"),
    VenueCategory.POOL: _UNSPLASH.format(photo="photo-1576610616656-d3aa5d1f4534"),
    VenueCategory.SALON: _UNSPLASH.format(photo="photo-1540555700478-4be289fbecef"),
    VenueCategory.YOGA: _UNSPLASH.format(photo="photo-1544367567-0f2fcb009e0b"),
}
DEFAULT_IMAGE = _UNSPLASH.format(photo="photo-1571902943202-507ec2618e8f")


def element_identity(element: Mapping[str, Any]) -> str | None:
    """요소 고유 식별자 ``type/id`` (노드/웨이/릴레이 간 id 충돌 방지)."""
    element_type = element.get("type")
    element_id = element.get("id")
    if not element_type or element_id is None:
        return None
    return f"{element_type}/{element_id}"


def external_venue_id(identity: str) -> str:
    """``node/42`` → ``ext-node-42``"""
    return EXTERNAL_ID_PREFIX + identity.replace("/", "-")


def _resolve_location(element: Mapping[str, Any]) -> Coordinates | None:
    lat, lon = element.get("lat"), element.get("lon")
    if lat is None or lon is None:
        center = element.get("center") or {}
        lat, lon = center.get("lat"), center.get("lon")
    if lat is None or lon is None:
        return None
    try:
        return Coordinates(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError):
        return None


def _address(tags: Mapping[str, str]) -> str | None:
    if tags.get("addr:full"):
        return tags["addr:full"]
    street = " ".join(part for part in (tags.get("addr:street"), tags.get("addr:housenumber")) if part)
    parts = [part for part in (street, tags.get("addr:city")) if part]
    return ", ".join(parts) or None


def _rating(identity: str, policy: RatingPolicy) -> tuple[float, int]:
    if policy == "unrated":
        return 0.0, 0
    # 요소 식별자로 시드 고정: 같은 장소는 조회할 때마다 같은 값
    rng = random.Random(identity)
    rating = round(rng.uniform(*SYNTHETIC_RATING_RANGE), 1)
    review_count = rng.randint(*SYNTHETIC_REVIEW_RANGE)
    return rating, review_count


def to_venue(
    element: Mapping[str, Any],
    identity: str,
    rating_policy: RatingPolicy = "synthetic",
) -> Venue | None:
    """단일 요소 변환. 필수 정보가 없으면 None."""
    tags: Mapping[str, str] = element.get("tags") or {}
    name = (tags.get("name") or tags.get("name:en") or "").strip()
    if not name:
        return None
    location = _resolve_location(element)
    if location is None:
        return None

    category = TagClassifier.classify(tags)
    rating, review_count = _rating(identity, rating_policy)
    return Venue(
        id=external_venue_id(identity),
        name=name,
        category=category,
        location=location,
        source=VenueSource.EXTERNAL,
        rating=rating,
        review_count=review_count,
        description=tags.get("description") or f"{category.label} listed on OpenStreetMap.",
        image_url=CATEGORY_IMAGES.get(category, DEFAULT_IMAGE),
        verified=True,
        sponsored=False,
        address=_address(tags),
        contact_phone=tags.get("phone") or tags.get("contact:phone"),
        website=tags.get("website") or tags.get("contact:website"),
        hours=tags.get("opening_hours"),
        amenity_tags=TagClassifier.amenity_tags(tags),
    )


def parse_elements(
    elements: Iterable[Mapping[str, Any]],
    rating_policy: RatingPolicy = "synthetic",
) -> list[Venue]:
    """elements[] → Venue 목록 (입력 순서 유지)."""
    seen: set[str] = set()
    venues: list[Venue] = []
    dropped = 0
    for element in elements:
        identity = element_identity(element)
        if identity is None or identity in seen:
            dropped += 1
            continue
        seen.add(identity)

        venue = to_venue(element, identity, rating_policy)
        if venue is None:
            dropped += 1
            continue
        venues.append(venue)

    if dropped:
        logger.debug("overpass_elements_dropped", extra={"dropped": dropped, "kept": len(venues)})
    return venues
