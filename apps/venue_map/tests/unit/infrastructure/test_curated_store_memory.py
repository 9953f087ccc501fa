"""InMemoryCuratedStore 테스트."""

from __future__ import annotations

import asyncio
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from apps.venue_map.application.nearby.ports import ChangePublisherPort
from apps.venue_map.domain.entities import VenueSubmission
from apps.venue_map.domain.enums import VenueCategory
from apps.venue_map.domain.exceptions import InvalidRatingError, VenueSubmissionError
from apps.venue_map.domain.services import haversine_km
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.infrastructure.persistence_memory import InMemoryCuratedStore

CENTER = Coordinates(41.0082, 28.9784)


@pytest.fixture
def publisher() -> MagicMock:
    mock = MagicMock(spec=ChangePublisherPort)
    mock.publish_change = AsyncMock()
    return mock


class TestRate:
    @pytest.mark.asyncio
    async def test_concurrent_ratings_do_not_lose_updates(self, make_venue, publisher):
        """rating=3, count=2 에 5 와 1 동시 반영 → count=4, (3*2+5+1)/4."""
        store = InMemoryCuratedStore([make_venue("v1", rating=3.0, review_count=2)], publisher=publisher)

        results = await asyncio.gather(store.rate("v1", 5), store.rate("v1", 1))

        venue = store.get("v1")
        assert results == [True, True]
        assert venue.review_count == 4
        assert venue.rating == pytest.approx((3 * 2 + 5 + 1) / 4)
        assert publisher.publish_change.await_count == 2

    @pytest.mark.asyncio
    async def test_many_concurrent_ratings(self, make_venue):
        store = InMemoryCuratedStore([make_venue("v1", rating=0.0, review_count=0)])
        values = [1, 2, 3, 4, 5] * 20

        await asyncio.gather(*(store.rate("v1", value) for value in values))

        venue = store.get("v1")
        assert venue.review_count == 100
        assert venue.rating == pytest.approx(3.0)

    @pytest.mark.asyncio
    async def test_unknown_venue_returns_false(self, publisher):
        store = InMemoryCuratedStore(publisher=publisher)
        assert await store.rate("missing", 4) is False
        publisher.publish_change.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, 6, -1])
    async def test_out_of_range(self, make_venue, value: int):
        store = InMemoryCuratedStore([make_venue("v1")])
        with pytest.raises(InvalidRatingError):
            await store.rate("v1", value)


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_unverified_near_area_center(self, publisher):
        store = InMemoryCuratedStore(publisher=publisher, rng=random.Random(3))
        submission = VenueSubmission(
            name="Kalamis Outdoor Gym",
            category=VenueCategory.PARK,
            description="Calisthenics bars",
            area_center=CENTER,
            submitter_id="user-9",
        )

        venue = await store.create(submission)

        assert venue.verified is False
        assert venue.sponsored is False
        assert venue.rating == 0.0
        assert haversine_km(CENTER, venue.location) <= 0.501
        assert (await store.search()).venues[0].id == venue.id
        publisher.publish_change.assert_awaited_once_with("insert", venue.id)

    @pytest.mark.asyncio
    async def test_invalid_submission(self):
        store = InMemoryCuratedStore()
        submission = VenueSubmission(
            name=" ",
            category=VenueCategory.PARK,
            description="",
            area_center=CENTER,
            submitter_id="user-9",
        )
        with pytest.raises(VenueSubmissionError):
            await store.create(submission)


class TestSearch:
    @pytest.mark.asyncio
    async def test_filters_and_orders(self, make_venue):
        store = InMemoryCuratedStore(
            [
                make_venue("low", rating=3.0),
                make_venue("sponsored", rating=1.0, sponsored=True),
                make_venue("pool", category=VenueCategory.POOL),
                make_venue("high", rating=4.8),
            ]
        )

        result = await store.search(VenueCategory.GYM)

        assert not result.degraded
        assert [venue.id for venue in result.venues] == ["sponsored", "high", "low"]

    @pytest.mark.asyncio
    async def test_query_returns_matching_venues(self, make_venue):
        store = InMemoryCuratedStore(
            [
                make_venue("gym", name="Moda Fitness"),
                make_venue("pool-a", category=VenueCategory.POOL, description="Olympic lanes", rating=3.5),
                make_venue("pool-b", category=VenueCategory.POOL, name="Lanes Club", rating=4.5),
                make_venue("pool-c", category=VenueCategory.POOL, name="Kids Splash"),
            ]
        )

        venues = await store.query(VenueCategory.POOL, "lanes")

        assert isinstance(venues, list)
        assert [venue.id for venue in venues] == ["pool-b", "pool-a"]
        assert [venue.id for venue in await store.query()] == ["pool-b", "gym", "pool-c", "pool-a"]


class TestOperatorEdits:
    @pytest.mark.asyncio
    async def test_upsert_and_delete_publish_changes(self, make_venue, publisher):
        store = InMemoryCuratedStore(publisher=publisher)

        await store.upsert(make_venue("v1"))
        await store.upsert(make_venue("v1", sponsored=True))
        deleted = await store.delete("v1")
        missing = await store.delete("v1")

        assert deleted is True
        assert missing is False
        ops = [call.args for call in publisher.publish_change.await_args_list]
        assert ops == [("insert", "v1"), ("update", "v1"), ("delete", "v1")]

    @pytest.mark.asyncio
    async def test_publisher_failure_does_not_fail_write(self, make_venue):
        publisher = MagicMock(spec=ChangePublisherPort)
        publisher.publish_change = AsyncMock(side_effect=ConnectionError("redis down"))
        store = InMemoryCuratedStore(publisher=publisher)

        await store.upsert(make_venue("v1"))

        assert store.get("v1") is not None
