"""Overpass API Client.

ExternalIndexClientPort 구현체. Overpass QL 을 form field ``data`` 로 POST 합니다.
모든 실패는 예외 대신 ``ExternalFetchResult.error`` 로 반환됩니다.
"""

from __future__ import annotations

import logging

import httpx

from apps.venue_map.application.nearby.dto import ExternalFetchResult
from apps.venue_map.application.nearby.ports import ExternalIndexClientPort
from apps.venue_map.application.nearby.services.geo_query_builder import OverpassQuery
from apps.venue_map.domain.exceptions import ExternalIndexUnavailableError
from apps.venue_map.domain.services import haversine_km
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.infrastructure.overpass.parser import RatingPolicy, parse_elements
from apps.venue_map.setup.constants import SERVICE_NAME, SERVICE_VERSION

logger = logging.getLogger(__name__)

DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"

# Overpass 는 서버 측 timeout 까지 응답을 붙잡고 있을 수 있음
OVERPASS_TIMEOUT = httpx.Timeout(
    connect=5.0,  # 연결 타임아웃: 5초
    read=25.0,  # 읽기 타임아웃: 서버 측 [timeout:25] 와 동일
    write=10.0,
    pool=5.0,
)

OVERPASS_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30.0,
)


def build_http_client(timeout: httpx.Timeout = OVERPASS_TIMEOUT) -> httpx.AsyncClient:
    """Overpass 호출용 AsyncClient 생성 (timeout + 연결 풀링)."""
    return httpx.AsyncClient(
        timeout=timeout,
        limits=OVERPASS_LIMITS,
        headers={"User-Agent": f"{SERVICE_NAME}/{SERVICE_VERSION}"},
    )


class OverpassClient(ExternalIndexClientPort):
    """Overpass API 기반 외부 인덱스 클라이언트.

    반환되는 외부 장소는 사용자 위치에서 가까운 순으로 정렬됩니다.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        endpoint: str = DEFAULT_OVERPASS_URL,
        timeout_seconds: float = 25.0,
        rating_policy: RatingPolicy = "synthetic",
    ) -> None:
        self._http = http_client
        self._endpoint = endpoint
        self._timeout = httpx.Timeout(timeout_seconds, connect=OVERPASS_TIMEOUT.connect)
        self._rating_policy = rating_policy

    async def fetch(self, query: OverpassQuery, center: Coordinates) -> ExternalFetchResult:
        try:
            elements = await self._request(query)
        except ExternalIndexUnavailableError as e:
            logger.warning(
                "overpass_fetch_failed",
                extra={"endpoint": self._endpoint, "error": str(e)},
            )
            return ExternalFetchResult(error=str(e))

        venues = parse_elements(elements, self._rating_policy)
        venues.sort(key=lambda venue: haversine_km(center, venue.location))
        logger.info(
            "overpass_fetch_completed",
            extra={"elements": len(elements), "venues": len(venues), "radius_m": query.radius_m},
        )
        return ExternalFetchResult(venues=tuple(venues))

    async def _request(self, query: OverpassQuery) -> list[dict]:
        """
        Raises:
            ExternalIndexUnavailableError: 네트워크/타임아웃/비정상 상태코드/JSON 오류
        """
        try:
            response = await self._http.post(
                self._endpoint,
                data={"data": query.to_ql()},
                timeout=self._timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            raise ExternalIndexUnavailableError(f"Overpass request timed out: {e!r}") from e
        except httpx.HTTPStatusError as e:
            raise ExternalIndexUnavailableError(
                f"Overpass returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalIndexUnavailableError(f"Overpass request failed: {e!r}") from e
        except ValueError as e:
            raise ExternalIndexUnavailableError(f"Overpass returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ExternalIndexUnavailableError("Overpass response is not a JSON object")
        elements = payload.get("elements")
        if not isinstance(elements, list):
            raise ExternalIndexUnavailableError("Overpass response has no 'elements' array")
        return elements
