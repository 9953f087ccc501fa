"""AggregationEngine 테스트."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from apps.venue_map.application.nearby.dto import (
    OUTCOME_DEGRADED,
    OUTCOME_EMPTY,
    OUTCOME_OK,
    AggregationState,
    CuratedSearchResult,
    ExternalFetchResult,
)
from apps.venue_map.application.nearby.ports import (
    ChangeFeedPort,
    CuratedStorePort,
    ExternalIndexClientPort,
    Subscription,
)
from apps.venue_map.application.nearby.services import AggregationEngine
from apps.venue_map.domain.enums import ALL, VenueCategory, VenueSource
from apps.venue_map.domain.exceptions import InvalidSearchRadiusError
from apps.venue_map.domain.value_objects import Coordinates

CENTER_A = Coordinates(41.0082, 28.9784)
CENTER_B = Coordinates(41.0769, 29.0436)


class GatedExternal(ExternalIndexClientPort):
    """중심 좌표별 응답을 돌려주는 외부 인덱스 fake.

    gate 가 지정된 좌표는 gate 가 열릴 때까지 응답을 보류합니다.
    """

    def __init__(self, responses, gates=None):
        self._responses = responses
        self._gates = gates or {}
        self.entered: dict[Coordinates, asyncio.Event] = {center: asyncio.Event() for center in responses}

    async def fetch(self, query, center):
        self.entered[center].set()
        gate = self._gates.get(center)
        if gate is not None:
            await gate.wait()
        return ExternalFetchResult(venues=tuple(self._responses[center]))


class SlowExternal(ExternalIndexClientPort):
    async def fetch(self, query, center):
        await asyncio.sleep(10)
        return ExternalFetchResult()


class RaisingExternal(ExternalIndexClientPort):
    async def fetch(self, query, center):
        raise RuntimeError("adapter bug")


def _curated_store(*venues) -> MagicMock:
    store = MagicMock(spec=CuratedStorePort)
    store.search = AsyncMock(return_value=CuratedSearchResult(venues=tuple(venues)))
    return store


def _external_venue(make_venue, element_id: int, **kwargs):
    return make_venue(f"ext-node-{element_id}", source=VenueSource.EXTERNAL, **kwargs)


class TestLoad:
    @pytest.mark.asyncio
    async def test_merges_curated_then_external(self, make_venue):
        curated = (make_venue("c-1", rating=4.9), make_venue("c-2", sponsored=True))
        external = (_external_venue(make_venue, 1), _external_venue(make_venue, 2))
        engine = AggregationEngine(GatedExternal({CENTER_A: external}), _curated_store(*curated))

        snapshot = await engine.load(CENTER_A)

        assert snapshot.venue_ids == ("c-2", "c-1", "ext-node-1", "ext-node-2")
        assert snapshot.state is AggregationState.READY
        assert snapshot.generation == 1
        assert snapshot.diagnostics.outcome == OUTCOME_OK
        assert engine.curated_slice == curated
        assert engine.external_slice == external

    @pytest.mark.asyncio
    async def test_passes_filter_to_curated_store(self, make_venue):
        store = _curated_store()
        engine = AggregationEngine(GatedExternal({CENTER_A: ()}), store)

        snapshot = await engine.load(CENTER_A, VenueCategory.POOL, "bebek", radius_m=1200)

        store.search.assert_awaited_once_with(VenueCategory.POOL, "bebek")
        assert snapshot.category_filter is VenueCategory.POOL
        assert snapshot.diagnostics.outcome == OUTCOME_EMPTY

    @pytest.mark.asyncio
    async def test_external_rows_follow_active_filter(self, make_venue):
        external = (
            _external_venue(make_venue, 1, name="Iron Gym"),
            _external_venue(make_venue, 2, name="Zen Aquatics", category=VenueCategory.POOL),
            _external_venue(make_venue, 3, name="City Pool", category=VenueCategory.POOL),
            _external_venue(make_venue, 4, name="Lido", category=VenueCategory.POOL, description="zen garden"),
        )
        engine = AggregationEngine(GatedExternal({CENTER_A: external}), _curated_store())

        snapshot = await engine.load(CENTER_A, VenueCategory.POOL, "zen")

        assert snapshot.venue_ids == ("ext-node-2", "ext-node-4")
        assert all(venue.matches(VenueCategory.POOL, "zen") for venue in snapshot.venues)
        assert snapshot.diagnostics.external_count == 2

    @pytest.mark.asyncio
    async def test_invalid_radius_rejected_before_state_change(self):
        engine = AggregationEngine(GatedExternal({CENTER_A: ()}), _curated_store())

        with pytest.raises(InvalidSearchRadiusError):
            await engine.load(CENTER_A, radius_m=0)

        assert engine.state is AggregationState.IDLE

    @pytest.mark.asyncio
    async def test_sources_are_fetched_concurrently(self, make_venue):
        """각 소스가 상대 호출 시작을 기다림 - 순차 실행이면 타임아웃으로 축소됨."""
        external_started = asyncio.Event()
        curated_started = asyncio.Event()

        class WaitingExternal(ExternalIndexClientPort):
            async def fetch(self, query, center):
                external_started.set()
                await curated_started.wait()
                return ExternalFetchResult(venues=(_external_venue(make_venue, 1),))

        async def curated_search(category_filter, search_text):
            curated_started.set()
            await external_started.wait()
            return CuratedSearchResult(venues=(make_venue("c-1"),))

        store = MagicMock(spec=CuratedStorePort)
        store.search = AsyncMock(side_effect=curated_search)
        engine = AggregationEngine(WaitingExternal(), store, external_timeout_s=1.0, curated_timeout_s=1.0)

        snapshot = await engine.load(CENTER_A)

        assert not snapshot.diagnostics.degraded
        assert snapshot.venue_ids == ("c-1", "ext-node-1")


class TestDegradation:
    @pytest.mark.asyncio
    async def test_external_timeout_serves_curated_rows(self, make_venue):
        curated = (make_venue("c-1"), make_venue("c-2"))
        engine = AggregationEngine(SlowExternal(), _curated_store(*curated), external_timeout_s=0.05)

        snapshot = await engine.load(CENTER_A)

        assert snapshot.venue_ids == ("c-1", "c-2")
        assert snapshot.state is AggregationState.PARTIAL_FAILURE
        assert "timed out" in snapshot.diagnostics.external_error
        assert snapshot.diagnostics.outcome == OUTCOME_DEGRADED
        assert not snapshot.diagnostics.seed_fallback

    @pytest.mark.asyncio
    async def test_external_error_result(self, make_venue):
        external = MagicMock(spec=ExternalIndexClientPort)
        external.fetch = AsyncMock(return_value=ExternalFetchResult(error="Overpass returned HTTP 504"))
        engine = AggregationEngine(external, _curated_store(make_venue("c-1")))

        snapshot = await engine.load(CENTER_A)

        assert snapshot.venue_ids == ("c-1",)
        assert snapshot.diagnostics.external_error == "Overpass returned HTTP 504"

    @pytest.mark.asyncio
    async def test_full_outage_falls_back_to_filtered_seed(self):
        store = MagicMock(spec=CuratedStorePort)
        store.search = AsyncMock(side_effect=ConnectionError("db down"))
        engine = AggregationEngine(RaisingExternal(), store)

        snapshot = await engine.load(CENTER_A, VenueCategory.SALON)

        assert snapshot.venue_ids == ("seed-6", "seed-7")
        assert snapshot.state is AggregationState.PARTIAL_FAILURE
        assert snapshot.diagnostics.seed_fallback
        assert snapshot.diagnostics.external_error is not None

    @pytest.mark.asyncio
    async def test_curated_timeout_falls_back_to_seed(self, make_venue):
        async def never(category_filter, search_text):
            await asyncio.sleep(10)

        store = MagicMock(spec=CuratedStorePort)
        store.search = AsyncMock(side_effect=never)
        engine = AggregationEngine(
            GatedExternal({CENTER_A: (_external_venue(make_venue, 1, name="Aqua Club"),)}),
            store,
            curated_timeout_s=0.05,
        )

        snapshot = await engine.load(CENTER_A, ALL, "aqua")

        assert snapshot.venue_ids == ("seed-5", "ext-node-1")
        assert snapshot.state is AggregationState.READY
        assert snapshot.diagnostics.seed_fallback


class TestRealtimeDelta:
    @pytest.mark.asyncio
    async def test_delta_replaces_only_curated_slice(self, make_venue):
        external = (_external_venue(make_venue, 1), _external_venue(make_venue, 2))
        engine = AggregationEngine(GatedExternal({CENTER_A: external}), _curated_store(make_venue("c-1")))
        await engine.load(CENTER_A, VenueCategory.GYM)

        await engine.on_realtime_delta(
            [
                make_venue("c-1", rating=4.5),
                make_venue("c-new", rating=5.0),
                make_venue("c-pool", category=VenueCategory.POOL),
            ]
        )

        snapshot = engine.snapshot
        assert snapshot.venue_ids == ("c-new", "c-1", "ext-node-1", "ext-node-2")
        assert engine.external_slice == external
        assert snapshot.generation == 1
        assert snapshot.center == CENTER_A

    @pytest.mark.asyncio
    async def test_delta_before_first_load_ignored(self, make_venue):
        engine = AggregationEngine(GatedExternal({CENTER_A: ()}), _curated_store())

        await engine.on_realtime_delta([make_venue("c-1")])

        assert engine.state is AggregationState.IDLE
        assert engine.snapshot.venues == ()

    @pytest.mark.asyncio
    async def test_delta_during_load_buffered_then_replayed(self, make_venue):
        gate = asyncio.Event()
        external = GatedExternal({CENTER_A: (_external_venue(make_venue, 1),)}, gates={CENTER_A: gate})
        engine = AggregationEngine(external, _curated_store(make_venue("c-old")))

        load_task = asyncio.create_task(engine.load(CENTER_A))
        await external.entered[CENTER_A].wait()
        assert engine.state is AggregationState.LOADING

        await engine.on_realtime_delta([make_venue("c-fresh")])
        assert engine.snapshot.venues == ()

        gate.set()
        snapshot = await load_task

        assert snapshot.venue_ids == ("c-fresh", "ext-node-1")
        assert engine.snapshot is snapshot

    @pytest.mark.asyncio
    async def test_delta_keeps_id_disjointness(self, make_venue):
        """외부 id 를 흉내 낸 큐레이션 항목이 와도 결과 id 는 유일."""
        external = (_external_venue(make_venue, 1),)
        engine = AggregationEngine(GatedExternal({CENTER_A: external}), _curated_store())
        await engine.load(CENTER_A)

        await engine.on_realtime_delta([make_venue("ext-node-1", name="Impostor")])

        ids = engine.snapshot.venue_ids
        assert ids == ("ext-node-1",)
        assert engine.snapshot.venues[0].name == "Impostor"


class TestStaleLoad:
    @pytest.mark.asyncio
    async def test_older_load_result_discarded(self, make_venue):
        gate_a = asyncio.Event()
        external = GatedExternal(
            {
                CENTER_A: (_external_venue(make_venue, 1),),
                CENTER_B: (_external_venue(make_venue, 2),),
            },
            gates={CENTER_A: gate_a},
        )
        engine = AggregationEngine(external, _curated_store())

        task_a = asyncio.create_task(engine.load(CENTER_A))
        await external.entered[CENTER_A].wait()
        snapshot_b = await engine.load(CENTER_B)

        gate_a.set()
        snapshot_a = await task_a

        assert snapshot_b.venue_ids == ("ext-node-2",)
        assert snapshot_a is snapshot_b
        assert engine.snapshot.generation == 2
        assert engine.external_slice[0].id == "ext-node-2"
        assert engine.snapshot.center == CENTER_B

    @pytest.mark.asyncio
    async def test_cancelled_load_restores_previous_state(self, make_venue):
        gate = asyncio.Event()
        external = GatedExternal(
            {CENTER_A: (_external_venue(make_venue, 1),), CENTER_B: ()},
            gates={CENTER_B: gate},
        )
        engine = AggregationEngine(external, _curated_store())
        await engine.load(CENTER_A)

        task = asyncio.create_task(engine.load(CENTER_B))
        await external.entered[CENTER_B].wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert engine.state is AggregationState.READY
        assert engine.snapshot.venue_ids == ("ext-node-1",)


class TestSubscriptions:
    @pytest.mark.asyncio
    async def test_listener_receives_publications(self, make_venue):
        engine = AggregationEngine(GatedExternal({CENTER_A: ()}), _curated_store(make_venue("c-1")))
        received = []
        unsubscribe = engine.subscribe(received.append)

        await engine.load(CENTER_A)
        unsubscribe()
        await engine.on_realtime_delta([])

        assert [snapshot.venue_ids for snapshot in received] == [("c-1",)]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_publish(self, make_venue):
        engine = AggregationEngine(GatedExternal({CENTER_A: ()}), _curated_store(make_venue("c-1")))
        engine.subscribe(MagicMock(side_effect=RuntimeError("render failed")))

        snapshot = await engine.load(CENTER_A)

        assert snapshot.venue_ids == ("c-1",)

    @pytest.mark.asyncio
    async def test_attach_and_detach_feed(self):
        engine = AggregationEngine(GatedExternal({CENTER_A: ()}), _curated_store())
        closer = AsyncMock()
        feed = MagicMock(spec=ChangeFeedPort)
        feed.subscribe = AsyncMock(return_value=Subscription("map", closer))

        subscription = await engine.attach_feed(feed)
        feed.subscribe.assert_awaited_once_with(engine.on_realtime_delta, view_key="map")

        await engine.detach_feed()
        await engine.detach_feed()

        assert subscription.closed
        closer.assert_awaited_once()
