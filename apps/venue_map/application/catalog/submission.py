"""Venue Submission Rules.

사용자 제출 장소의 검증과 좌표 배치 규칙입니다.
저장소 구현체(Postgres / InMemory)가 공통으로 사용합니다.
"""

from __future__ import annotations

import math
import random

from apps.venue_map.domain.entities import Venue, VenueSubmission
from apps.venue_map.domain.enums import VenueCategory, VenueSource
from apps.venue_map.domain.exceptions import VenueSubmissionError
from apps.venue_map.domain.value_objects import Coordinates

MAX_NAME_LENGTH = 200
DEFAULT_PLACEMENT_RADIUS_M = 500.0


def validate_submission(submission: VenueSubmission) -> None:
    """
    Raises:
        VenueSubmissionError: 이름 누락/과다, 알 수 없는 카테고리, 제출자 누락
    """
    name = (submission.name or "").strip()
    if not name:
        raise VenueSubmissionError("name", "must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise VenueSubmissionError("name", f"must be at most {MAX_NAME_LENGTH} characters")
    if not isinstance(submission.category, VenueCategory):
        raise VenueSubmissionError("category", f"unknown category {submission.category!r}")
    if not (submission.submitter_id or "").strip():
        raise VenueSubmissionError("submitter_id", "must not be empty")


def place_within(
    center: Coordinates,
    radius_m: float = DEFAULT_PLACEMENT_RADIUS_M,
    rng: random.Random | None = None,
) -> Coordinates:
    """center 기준 반경 radius_m 원 안의 균일 분포 임의 좌표."""
    if radius_m <= 0:
        return center
    rng = rng or random.Random()
    # sqrt 로 보정해야 원 안에서 면적 균일
    distance = radius_m * math.sqrt(rng.random())
    bearing = rng.uniform(0.0, 2 * math.pi)
    return center.offset(north_m=distance * math.cos(bearing), east_m=distance * math.sin(bearing))


def _split_contact(contact_info: str | None) -> tuple[str | None, str | None]:
    """contact_info 를 (phone, website) 로 분리."""
    contact = (contact_info or "").strip()
    if not contact:
        return None, None
    lowered = contact.lower()
    if lowered.startswith(("http://", "https://", "www.")):
        return None, contact
    return contact, None


def build_submitted_venue(submission: VenueSubmission, venue_id: str, location: Coordinates) -> Venue:
    """제출 내용을 검수 전 상태의 Venue 로 변환합니다."""
    phone, website = _split_contact(submission.contact_info)
    return Venue(
        id=venue_id,
        name=submission.name.strip(),
        category=submission.category,
        location=location,
        source=VenueSource.CURATED,
        rating=0.0,
        review_count=0,
        description=(submission.description or "").strip(),
        verified=False,
        sponsored=False,
        address=(submission.address or "").strip() or None,
        contact_phone=phone,
        website=website,
        submitted_by=submission.submitter_id,
    )


def running_average(rating: float, review_count: int, value: int) -> tuple[float, int]:
    """(old*count + value) / (count + 1), count + 1."""
    count = review_count + 1
    return (rating * review_count + value) / count, count
