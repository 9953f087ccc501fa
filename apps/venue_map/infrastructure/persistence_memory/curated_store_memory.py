"""In-Memory Curated Store.

로컬 개발/테스트용 CuratedStorePort 구현체. 프로세스 재시작 시 데이터가 사라집니다.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from collections import defaultdict
from typing import Iterable

from apps.venue_map.application.catalog import (
    build_submitted_venue,
    place_within,
    running_average,
    validate_submission,
)
from apps.venue_map.application.nearby.dto import CuratedSearchResult
from apps.venue_map.application.nearby.ports import (
    CHANGE_OP_DELETE,
    CHANGE_OP_INSERT,
    CHANGE_OP_UPDATE,
    ChangePublisherPort,
    CuratedStorePort,
)
from apps.venue_map.application.nearby.services.venue_merger import order_curated
from apps.venue_map.domain.entities import Venue, VenueSubmission
from apps.venue_map.domain.enums import ALL, CategoryFilter
from apps.venue_map.domain.exceptions import InvalidRatingError
from apps.venue_map.infrastructure.realtime.notify import notify_change

logger = logging.getLogger(__name__)


class InMemoryCuratedStore(CuratedStorePort):
    """dict 기반 큐레이션 저장소.

    평점 반영은 장소별 asyncio.Lock 으로 직렬화합니다.
    """

    def __init__(
        self,
        venues: Iterable[Venue] = (),
        publisher: ChangePublisherPort | None = None,
        placement_radius_m: float = 500.0,
        rng: random.Random | None = None,
    ) -> None:
        self._venues: dict[str, Venue] = {venue.id: venue for venue in venues}
        self._rating_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._publisher = publisher
        self._placement_radius_m = placement_radius_m
        self._rng = rng or random.Random()

    def get(self, venue_id: str) -> Venue | None:
        return self._venues.get(venue_id)

    async def search(
        self,
        category_filter: CategoryFilter = ALL,
        search_text: str | None = None,
    ) -> CuratedSearchResult:
        return CuratedSearchResult(venues=order_curated(self._venues.values(), category_filter, search_text))

    async def create(self, submission: VenueSubmission) -> Venue:
        validate_submission(submission)
        location = place_within(submission.area_center, self._placement_radius_m, self._rng)
        venue = build_submitted_venue(submission, str(uuid.uuid4()), location)
        self._venues[venue.id] = venue
        logger.info("venue_submitted", extra={"venue_id": venue.id, "submitted_by": venue.submitted_by})
        await notify_change(self._publisher, CHANGE_OP_INSERT, venue.id)
        return venue

    async def rate(self, venue_id: str, value: int) -> bool:
        if not 1 <= value <= 5:
            raise InvalidRatingError(value)
        if venue_id not in self._venues:
            return False

        async with self._rating_locks[venue_id]:
            current = self._venues.get(venue_id)
            if current is None:
                return False
            rating, count = running_average(current.rating, current.review_count, value)
            self._venues[venue_id] = current.with_rating(rating, count)

        await notify_change(self._publisher, CHANGE_OP_UPDATE, venue_id)
        return True

    async def upsert(self, venue: Venue) -> Venue:
        op = CHANGE_OP_UPDATE if venue.id in self._venues else CHANGE_OP_INSERT
        self._venues[venue.id] = venue
        await notify_change(self._publisher, op, venue.id)
        return venue

    async def delete(self, venue_id: str) -> bool:
        if self._venues.pop(venue_id, None) is None:
            return False
        self._rating_locks.pop(venue_id, None)
        await notify_change(self._publisher, CHANGE_OP_DELETE, venue_id)
        return True
