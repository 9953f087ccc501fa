"""SqlaCuratedStore 테스트 (AsyncSession Mock)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from apps.venue_map.application.nearby.ports import ChangePublisherPort
from apps.venue_map.domain.entities import VenueSubmission
from apps.venue_map.domain.enums import VenueCategory
from apps.venue_map.domain.exceptions import CuratedStoreUnavailableError, InvalidRatingError
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.infrastructure.persistence_postgres import CuratedVenueModel, SqlaCuratedStore
from apps.venue_map.infrastructure.persistence_postgres.curated_store_sqla import build_rating_update
from apps.venue_map.infrastructure.persistence_postgres.models import to_model

CENTER = Coordinates(41.0082, 28.9784)


def _db_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


@pytest.fixture
def session() -> MagicMock:
    mock = MagicMock()
    mock.__aenter__.return_value = mock
    mock.execute = AsyncMock()
    mock.commit = AsyncMock()
    mock.get = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def publisher() -> MagicMock:
    mock = MagicMock(spec=ChangePublisherPort)
    mock.publish_change = AsyncMock()
    return mock


@pytest.fixture
def store(session, publisher) -> SqlaCuratedStore:
    return SqlaCuratedStore(MagicMock(return_value=session), publisher=publisher)


def _rows_result(rows: list[CuratedVenueModel]) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


class TestRatingUpdate:
    def test_single_statement_running_average(self):
        sql = str(build_rating_update("v1", 4).compile(dialect=postgresql.dialect()))

        assert sql.startswith("UPDATE venues SET")
        assert "venues.rating * venues.review_count" in sql
        assert "review_count=(venues.review_count +" in sql
        assert "WHERE venues.id =" in sql

    @pytest.mark.asyncio
    async def test_rate_executes_update_and_notifies(self, store, session, publisher):
        session.execute.return_value = MagicMock(rowcount=1)

        assert await store.rate("v1", 5) is True

        session.execute.assert_awaited_once()
        session.commit.assert_awaited_once()
        publisher.publish_change.assert_awaited_once_with("update", "v1")

    @pytest.mark.asyncio
    async def test_rate_unknown_venue(self, store, session, publisher):
        session.execute.return_value = MagicMock(rowcount=0)

        assert await store.rate("missing", 3) is False
        publisher.publish_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_rejects_out_of_range(self, store, session):
        with pytest.raises(InvalidRatingError):
            await store.rate("v1", 9)
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_db_failure(self, store, session):
        session.execute.side_effect = _db_error()
        with pytest.raises(CuratedStoreUnavailableError):
            await store.rate("v1", 3)


class TestSearch:
    @pytest.mark.asyncio
    async def test_maps_rows_and_skips_bad_ones(self, store, session, make_venue):
        broken = to_model(make_venue("broken"))
        broken.category = "bowling"
        session.execute.return_value = _rows_result([to_model(make_venue("ok", sponsored=True)), broken])

        result = await store.search(VenueCategory.GYM, "club")

        assert not result.degraded
        assert [venue.id for venue in result.venues] == ["ok"]
        assert result.venues[0].sponsored is True

    @pytest.mark.asyncio
    async def test_search_text_is_escaped(self, store, session):
        session.execute.return_value = _rows_result([])

        await store.search(search_text="100%_fit")

        stmt = session.execute.await_args.args[0]
        params = stmt.compile(dialect=postgresql.dialect()).params
        assert "%100\\%\\_fit%" in params.values()

    @pytest.mark.asyncio
    async def test_failure_falls_back_to_seed(self, store, session):
        session.execute.side_effect = _db_error()

        result = await store.search(VenueCategory.POOL)

        assert result.degraded
        assert "Curated store query failed" in result.error
        assert result.venues
        assert all(venue.category is VenueCategory.POOL for venue in result.venues)


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_commits_then_notifies(self, store, session, publisher):
        submission = VenueSubmission(
            name="Bostanci Court",
            category=VenueCategory.BASKETBALL,
            description="",
            area_center=CENTER,
            submitter_id="user-1",
            contact_info="www.bostanci.example",
        )

        venue = await store.create(submission)

        (model,) = session.add.call_args.args
        assert model.id == venue.id
        assert model.website == "www.bostanci.example"
        assert model.verified is False
        session.commit.assert_awaited_once()
        publisher.publish_change.assert_awaited_once_with("insert", venue.id)

    @pytest.mark.asyncio
    async def test_create_failure_raises_unavailable(self, store, session, publisher):
        session.commit.side_effect = _db_error()
        submission = VenueSubmission(
            name="Bostanci Court",
            category=VenueCategory.BASKETBALL,
            description="",
            area_center=CENTER,
            submitter_id="user-1",
        )

        with pytest.raises(CuratedStoreUnavailableError):
            await store.create(submission)
        publisher.publish_change.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upsert_updates_existing_row(self, store, session, publisher, make_venue):
        existing = to_model(make_venue("v1"))
        session.get.return_value = existing

        await store.upsert(make_venue("v1", name="Renamed", sponsored=True))

        assert existing.name == "Renamed"
        assert existing.is_sponsored is True
        session.add.assert_not_called()
        publisher.publish_change.assert_awaited_once_with("update", "v1")

    @pytest.mark.asyncio
    async def test_delete(self, store, session, publisher):
        session.execute.return_value = MagicMock(rowcount=1)

        assert await store.delete("v1") is True
        publisher.publish_change.assert_awaited_once_with("delete", "v1")
