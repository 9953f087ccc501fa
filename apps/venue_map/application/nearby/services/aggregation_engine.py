"""Aggregation Engine.

외부 인덱스 결과와 큐레이션 결과를 병합하고, 큐레이션 쪽 실시간 변경을
외부 결과를 건드리지 않고 반영하는 라이브 뷰를 관리합니다.

상태:
    IDLE → LOADING → READY
                   → PARTIAL_FAILURE (외부 실패, 큐레이션만으로 Ready)

동시성 규칙:
- load 의 외부 조회와 큐레이션 조회는 동시에 실행 (asyncio.gather)
- 상태 변경은 ``_lock`` 으로 직렬화
- 새 load 가 발급되면 진행 중이던 이전 load 결과는 폐기 (발급 순서 기준)
- load 진행 중 도착한 실시간 delta 는 버퍼링 후 load 완료 뒤 재적용
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from typing import Callable, Sequence

from apps.venue_map.application.catalog.seed import filter_seed_venues
from apps.venue_map.application.nearby.dto import (
    AggregationSnapshot,
    AggregationState,
    CuratedSearchResult,
    ExternalFetchResult,
    LoadDiagnostics,
)
from apps.venue_map.application.nearby.ports import (
    ChangeFeedPort,
    CuratedStorePort,
    ExternalIndexClientPort,
    Subscription,
)
from apps.venue_map.application.nearby.services.geo_query_builder import (
    GeoQueryBuilder,
    OverpassQuery,
)
from apps.venue_map.application.nearby.services.venue_merger import merge_slices, order_curated
from apps.venue_map.domain.entities import Venue
from apps.venue_map.domain.enums import ALL, CategoryFilter
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.setup import metrics
from apps.venue_map.setup.constants import DEFAULT_RADIUS_METERS

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AggregationSnapshot], None]

DEFAULT_EXTERNAL_TIMEOUT_SECONDS = 25.0
DEFAULT_CURATED_TIMEOUT_SECONDS = 10.0


class AggregationEngine:
    """외부/큐레이션 장소 집계 엔진 (맵 뷰 1개당 1개).

    발행 결과는 항상 두 slice 의 순수 함수입니다::

        published = merge_slices(curated_slice, external_slice)

    실시간 delta 는 ``curated_slice`` 만 교체하며 ``external_slice`` 는
    load 에 의해서만 통째로 교체됩니다.
    """

    def __init__(
        self,
        external: ExternalIndexClientPort,
        curated: CuratedStorePort,
        query_builder: GeoQueryBuilder | None = None,
        *,
        external_timeout_s: float = DEFAULT_EXTERNAL_TIMEOUT_SECONDS,
        curated_timeout_s: float = DEFAULT_CURATED_TIMEOUT_SECONDS,
        default_radius_m: int = DEFAULT_RADIUS_METERS,
    ) -> None:
        self._external = external
        self._curated = curated
        self._query_builder = query_builder or GeoQueryBuilder()
        self._external_timeout_s = external_timeout_s
        self._curated_timeout_s = curated_timeout_s
        self._default_radius_m = default_radius_m

        self._lock = asyncio.Lock()
        self._issued_generation = 0
        self._state = AggregationState.IDLE
        self._category_filter: CategoryFilter = ALL
        self._search_text: str | None = None
        self._center: Coordinates | None = None
        self._curated_slice: tuple[Venue, ...] = ()
        self._external_slice: tuple[Venue, ...] = ()
        self._diagnostics = LoadDiagnostics()
        self._snapshot = AggregationSnapshot()
        self._pending_deltas: list[tuple[Venue, ...]] = []
        self._listeners: list[SnapshotListener] = []
        self._subscription: Subscription | None = None

    # ------------------------------------------------------------------
    # 조회용 프로퍼티
    # ------------------------------------------------------------------

    @property
    def state(self) -> AggregationState:
        return self._state

    @property
    def snapshot(self) -> AggregationSnapshot:
        """마지막으로 발행된 결과."""
        return self._snapshot

    @property
    def curated_slice(self) -> tuple[Venue, ...]:
        return self._curated_slice

    @property
    def external_slice(self) -> tuple[Venue, ...]:
        return self._external_slice

    # ------------------------------------------------------------------
    # 발행 구독
    # ------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """발행 리스너 등록. 반환된 함수를 호출하면 해제됩니다."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def attach_feed(self, feed: ChangeFeedPort, view_key: str = "map") -> Subscription:
        """실시간 변경 피드 연결 (엔진당 구독 1개)."""
        await self.detach_feed()
        self._subscription = await feed.subscribe(self.on_realtime_delta, view_key=view_key)
        return self._subscription

    async def detach_feed(self) -> None:
        if self._subscription is not None:
            subscription, self._subscription = self._subscription, None
            await subscription.close()

    # ------------------------------------------------------------------
    # load
    # ------------------------------------------------------------------

    async def load(
        self,
        center: Coordinates,
        category_filter: CategoryFilter = ALL,
        search_text: str | None = None,
        radius_m: int | None = None,
    ) -> AggregationSnapshot:
        """외부/큐레이션 동시 조회 후 병합 결과를 발행합니다.

        네트워크 의존 소스의 실패는 예외로 올라오지 않고 축소(degrade)됩니다.
        이 호출 이후 더 새로운 load 가 발급되었다면 결과는 폐기되고
        마지막 발행 스냅샷이 반환됩니다.

        Raises:
            InvalidSearchRadiusError: radius_m <= 0
        """
        radius = self._default_radius_m if radius_m is None else radius_m
        query = self._query_builder.build(category_filter, center, radius)

        async with self._lock:
            self._issued_generation += 1
            generation = self._issued_generation
            self._state = AggregationState.LOADING

        started = time.perf_counter()
        try:
            external_result, curated_result = await asyncio.gather(
                self._fetch_external(query, center),
                self._search_curated(category_filter, search_text),
            )
        except asyncio.CancelledError:
            self._abort_load(generation)
            raise

        # 외부 결과도 같은 필터로 거름 (거리순 유지)
        external_venues = tuple(
            venue for venue in external_result.venues if venue.matches(category_filter, search_text)
        )
        diagnostics = LoadDiagnostics(
            external_error=external_result.error,
            curated_degraded=curated_result.degraded,
            curated_error=curated_result.error,
            external_count=len(external_venues),
            curated_count=len(curated_result.venues),
        )

        async with self._lock:
            if generation != self._issued_generation:
                logger.debug(
                    "stale_load_discarded",
                    extra={"generation": generation, "latest": self._issued_generation},
                )
                return self._snapshot

            self._category_filter = category_filter
            self._search_text = search_text
            self._center = center
            self._curated_slice = tuple(curated_result.venues)
            self._external_slice = external_venues
            self._diagnostics = diagnostics
            self._state = (
                AggregationState.PARTIAL_FAILURE
                if external_result.error is not None
                else AggregationState.READY
            )
            snapshot = self._publish(generation)
            snapshot = self._replay_pending_deltas() or snapshot

        metrics.observe_load_duration(diagnostics.outcome, time.perf_counter() - started)
        if external_result.error is not None:
            metrics.increment_degraded("external")
        if curated_result.degraded:
            metrics.increment_degraded("seed")

        logger.info(
            "venues_loaded",
            extra={
                "generation": generation,
                "category": str(category_filter),
                "external_count": diagnostics.external_count,
                "curated_count": diagnostics.curated_count,
                "outcome": diagnostics.outcome,
            },
        )
        return snapshot

    async def _fetch_external(self, query: OverpassQuery, center: Coordinates) -> ExternalFetchResult:
        try:
            result = await asyncio.wait_for(
                self._external.fetch(query, center),
                timeout=self._external_timeout_s,
            )
        except asyncio.TimeoutError:
            result = ExternalFetchResult(
                error=f"External index timed out after {self._external_timeout_s:g}s"
            )
        except Exception as e:
            logger.exception("external_fetch_raised")
            result = ExternalFetchResult(error=f"External index failed: {e!r}")

        metrics.increment_external_fetch(result.ok)
        if not result.ok:
            logger.warning("external_fetch_degraded", extra={"error": result.error})
        return result

    async def _search_curated(
        self,
        category_filter: CategoryFilter,
        search_text: str | None,
    ) -> CuratedSearchResult:
        try:
            return await asyncio.wait_for(
                self._curated.search(category_filter, search_text),
                timeout=self._curated_timeout_s,
            )
        except asyncio.TimeoutError:
            error = f"Curated store timed out after {self._curated_timeout_s:g}s"
        except Exception as e:
            logger.exception("curated_search_raised")
            error = f"Curated store failed: {e!r}"

        logger.warning("curated_search_degraded_to_seed", extra={"error": error})
        return CuratedSearchResult(
            venues=filter_seed_venues(category_filter, search_text),
            degraded=True,
            error=error,
        )

    def _abort_load(self, generation: int) -> None:
        """취소된 load 가 최신이면 마지막 발행 상태로 되돌립니다."""
        if generation != self._issued_generation:
            return
        self._state = self._snapshot.state
        if self._state is not AggregationState.IDLE:
            self._replay_pending_deltas()
        else:
            self._pending_deltas.clear()

    # ------------------------------------------------------------------
    # 실시간 delta
    # ------------------------------------------------------------------

    async def on_realtime_delta(self, curated_venues: Sequence[Venue]) -> None:
        """큐레이션 전체 목록 변경 반영 (외부 slice 는 유지).

        load 진행 중이면 버퍼링, 아직 load 전(IDLE)이면 무시합니다.
        """
        delta = tuple(curated_venues)
        async with self._lock:
            if self._state is AggregationState.LOADING:
                self._pending_deltas.append(delta)
                metrics.increment_realtime_delta("buffered")
                logger.debug("realtime_delta_buffered", extra={"size": len(delta)})
                return
            if self._state is AggregationState.IDLE:
                metrics.increment_realtime_delta("ignored")
                return
            self._apply_delta(delta)

    def _replay_pending_deltas(self) -> AggregationSnapshot | None:
        snapshot = None
        pending, self._pending_deltas = self._pending_deltas, []
        for delta in pending:
            snapshot = self._apply_delta(delta)
        return snapshot

    def _apply_delta(self, delta: tuple[Venue, ...]) -> AggregationSnapshot:
        self._curated_slice = order_curated(delta, self._category_filter, self._search_text)
        self._diagnostics = replace(
            self._diagnostics,
            curated_degraded=False,
            curated_error=None,
            curated_count=len(self._curated_slice),
        )
        metrics.increment_realtime_delta("applied")
        return self._publish(self._snapshot.generation)

    # ------------------------------------------------------------------
    # 발행
    # ------------------------------------------------------------------

    def _publish(self, generation: int) -> AggregationSnapshot:
        snapshot = AggregationSnapshot(
            venues=merge_slices(self._curated_slice, self._external_slice),
            state=self._state,
            generation=generation,
            category_filter=self._category_filter,
            search_text=self._search_text,
            diagnostics=self._diagnostics,
            center=self._center,
        )
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("snapshot_listener_failed")
        return snapshot
