"""Curated Store Port."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from apps.venue_map.domain.enums import ALL

if TYPE_CHECKING:
    from apps.venue_map.application.nearby.dto import CuratedSearchResult
    from apps.venue_map.domain.entities import Venue, VenueSubmission
    from apps.venue_map.domain.enums import CategoryFilter


class CuratedStorePort(ABC):
    """운영자 관리 장소 카탈로그 Port.

    구현체:
        - SqlaCuratedStore (infrastructure/persistence_postgres/)
        - InMemoryCuratedStore (infrastructure/persistence_memory/)
    """

    @abstractmethod
    async def search(
        self,
        category_filter: "CategoryFilter" = ALL,
        search_text: str | None = None,
    ) -> "CuratedSearchResult":
        """필터 조회 (sponsored desc, rating desc).

        저장소 장애 시 내장 시드 목록을 같은 필터로 반환하고 ``degraded=True`` 로 표시합니다.
        """
        ...

    async def query(
        self,
        category_filter: "CategoryFilter" = ALL,
        search_text: str | None = None,
    ) -> list["Venue"]:
        """``search`` 결과의 Venue 목록만 반환."""
        result = await self.search(category_filter, search_text)
        return list(result.venues)

    @abstractmethod
    async def create(self, submission: "VenueSubmission") -> "Venue":
        """사용자 제출 장소 생성 (verified=False, sponsored=False).

        Raises:
            VenueSubmissionError: 입력 검증 실패
            CuratedStoreUnavailableError: 저장 실패
        """
        ...

    @abstractmethod
    async def rate(self, venue_id: str, value: int) -> bool:
        """평점 반영 (running average). 알 수 없는 id 이면 False.

        동시 호출 간 lost update 가 없어야 합니다.

        Raises:
            InvalidRatingError: value 가 1~5 범위 밖
        """
        ...

    @abstractmethod
    async def upsert(self, venue: "Venue") -> "Venue":
        """운영자 입력/수정 (verified, sponsored 지정 가능)."""
        ...

    @abstractmethod
    async def delete(self, venue_id: str) -> bool:
        """운영자 삭제. 알 수 없는 id 이면 False."""
        ...
