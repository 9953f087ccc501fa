"""Venue Merger.

큐레이션 slice 와 외부 slice 를 하나의 발행 목록으로 병합합니다.
결과는 두 slice 의 순수 함수입니다 (concat → 중복 제거 → 정렬).
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from apps.venue_map.domain.entities import Venue, curated_order_key
from apps.venue_map.domain.enums import ALL, CategoryFilter

logger = logging.getLogger(__name__)


def order_curated(
    venues: Iterable[Venue],
    category_filter: CategoryFilter = ALL,
    search_text: str | None = None,
) -> tuple[Venue, ...]:
    """실시간 전체 목록을 현재 필터로 다시 거르고 (sponsored, rating) 순으로 정렬."""
    matched = [venue for venue in venues if venue.matches(category_filter, search_text)]
    return tuple(sorted(matched, key=curated_order_key))


def merge_slices(curated: Sequence[Venue], external: Sequence[Venue]) -> tuple[Venue, ...]:
    """curated ++ external, id 중복 제거(먼저 온 것 유지), sponsored desc 안정 정렬.

    큐레이션이 항상 외부보다 앞서므로 id 가 겹치면 큐레이션 항목이 남습니다.
    """
    seen: set[str] = set()
    merged: list[Venue] = []
    dropped = 0
    for venue in (*curated, *external):
        if venue.id in seen:
            dropped += 1
            continue
        seen.add(venue.id)
        merged.append(venue)

    if dropped:
        logger.warning("merge_duplicate_ids_dropped", extra={"dropped": dropped})

    # sorted() 는 안정 정렬 - 동률은 삽입 순서(curated → external) 유지
    return tuple(sorted(merged, key=lambda venue: not venue.sponsored))
