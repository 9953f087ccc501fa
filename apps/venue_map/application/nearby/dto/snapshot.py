"""Aggregation Snapshot DTOs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from apps.venue_map.domain.entities import Venue
from apps.venue_map.domain.enums import ALL, CategoryFilter
from apps.venue_map.domain.value_objects import Coordinates

OUTCOME_OK = "ok"
OUTCOME_DEGRADED = "degraded"
OUTCOME_EMPTY = "empty"


class AggregationState(str, Enum):
    """집계 엔진 상태."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PARTIAL_FAILURE = "partial_failure"  # 큐레이션 결과만으로 Ready


@dataclass(frozen=True)
class LoadDiagnostics:
    """관측용 진단 정보.

    UI 는 노출하지 않을 수 있지만, 장애로 인한 축소(degraded)와
    정상적인 0건(empty)을 구분할 수 있어야 합니다.
    """

    external_error: str | None = None
    curated_degraded: bool = False
    curated_error: str | None = None
    external_count: int = 0
    curated_count: int = 0

    @property
    def degraded(self) -> bool:
        return self.external_error is not None or self.curated_degraded

    @property
    def seed_fallback(self) -> bool:
        return self.curated_degraded

    @property
    def outcome(self) -> str:
        if self.degraded:
            return OUTCOME_DEGRADED
        if self.external_count + self.curated_count == 0:
            return OUTCOME_EMPTY
        return OUTCOME_OK


@dataclass(frozen=True)
class AggregationSnapshot:
    """발행된 병합 결과 (불변)."""

    venues: tuple[Venue, ...] = field(default_factory=tuple)
    state: AggregationState = AggregationState.IDLE
    generation: int = 0
    category_filter: CategoryFilter = ALL
    search_text: str | None = None
    diagnostics: LoadDiagnostics = field(default_factory=LoadDiagnostics)
    # 거리 계산 기준 (이 결과를 만든 load 의 중심)
    center: Coordinates | None = None

    @property
    def venue_ids(self) -> tuple[str, ...]:
        return tuple(venue.id for venue in self.venues)
