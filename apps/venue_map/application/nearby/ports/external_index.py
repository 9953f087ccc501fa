"""External Index Client Port."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apps.venue_map.application.nearby.dto import ExternalFetchResult
    from apps.venue_map.application.nearby.services.geo_query_builder import OverpassQuery
    from apps.venue_map.domain.value_objects import Coordinates


class ExternalIndexClientPort(ABC):
    """공개 지리 인덱스 조회 Port.

    구현체:
        - OverpassClient (infrastructure/overpass/)
    """

    @abstractmethod
    async def fetch(self, query: "OverpassQuery", center: "Coordinates") -> "ExternalFetchResult":
        """쿼리를 실행하고 정규화된 Venue 목록을 반환합니다.

        네트워크 실패/타임아웃/비정상 응답은 예외 대신
        ``ExternalFetchResult(venues=(), error=...)`` 로 반환합니다.
        """
        ...
