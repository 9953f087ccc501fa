"""Source Fetch Result DTOs."""

from __future__ import annotations

from dataclasses import dataclass, field

from apps.venue_map.domain.entities import Venue


@dataclass(frozen=True)
class ExternalFetchResult:
    """외부 인덱스 조회 결과.

    실패 시 ``venues`` 는 비어 있고 ``error`` 에 원인이 담깁니다.
    호출자는 실패를 "외부 결과 0건" 으로 취급합니다.
    """

    venues: tuple[Venue, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CuratedSearchResult:
    """큐레이션 저장소 조회 결과.

    ``degraded`` 가 True 이면 저장소 장애로 내장 시드 목록이 대신 반환된 것입니다.
    """

    venues: tuple[Venue, ...] = field(default_factory=tuple)
    degraded: bool = False
    error: str | None = None
