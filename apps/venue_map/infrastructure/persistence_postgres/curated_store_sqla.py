"""SQLAlchemy Curated Store.

CuratedStorePort 의 PostgreSQL 구현체.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from apps.venue_map.application.catalog import (
    build_submitted_venue,
    filter_seed_venues,
    place_within,
    validate_submission,
)
from apps.venue_map.application.nearby.dto import CuratedSearchResult
from apps.venue_map.application.nearby.ports import (
    CHANGE_OP_DELETE,
    CHANGE_OP_INSERT,
    CHANGE_OP_UPDATE,
    ChangePublisherPort,
    CuratedStorePort,
)
from apps.venue_map.domain.entities import Venue, VenueSubmission
from apps.venue_map.domain.enums import ALL, CategoryFilter, VenueCategory
from apps.venue_map.domain.exceptions import CuratedStoreUnavailableError, InvalidRatingError
from apps.venue_map.infrastructure.persistence_postgres.models import (
    CuratedVenueModel,
    apply_entity,
    to_entity,
    to_model,
)
from apps.venue_map.infrastructure.realtime.notify import notify_change

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

MIN_RATING_VALUE = 1
MAX_RATING_VALUE = 5


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_rating_update(venue_id: str, value: int):
    """평점 반영 UPDATE 문.

    read-modify-write 를 DB 한 문장으로 처리하므로 동시 호출 간 lost update 가 없습니다::

        UPDATE venues
           SET rating = (rating * review_count + :value) / (review_count + 1),
               review_count = review_count + 1
         WHERE id = :venue_id
    """
    return (
        update(CuratedVenueModel)
        .where(CuratedVenueModel.id == venue_id)
        .values(
            rating=(CuratedVenueModel.rating * CuratedVenueModel.review_count + value)
            / (CuratedVenueModel.review_count + 1),
            review_count=CuratedVenueModel.review_count + 1,
        )
        .execution_options(synchronize_session=False)
    )


class SqlaCuratedStore(CuratedStorePort):
    """PostgreSQL 큐레이션 저장소.

    쓰기가 커밋된 뒤에만 변경 알림을 발행합니다.
    """

    def __init__(
        self,
        session_factory: "async_sessionmaker[AsyncSession]",
        publisher: ChangePublisherPort | None = None,
        placement_radius_m: float = 500.0,
        rng: random.Random | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._publisher = publisher
        self._placement_radius_m = placement_radius_m
        self._rng = rng or random.Random()

    async def search(
        self,
        category_filter: CategoryFilter = ALL,
        search_text: str | None = None,
    ) -> CuratedSearchResult:
        stmt = select(CuratedVenueModel)
        if category_filter != ALL:
            stmt = stmt.where(CuratedVenueModel.category == VenueCategory(category_filter).value)
        needle = (search_text or "").strip()
        if needle:
            pattern = _like_pattern(needle)
            stmt = stmt.where(
                or_(
                    CuratedVenueModel.name.ilike(pattern, escape="\\"),
                    CuratedVenueModel.description.ilike(pattern, escape="\\"),
                )
            )
        stmt = stmt.order_by(CuratedVenueModel.is_sponsored.desc(), CuratedVenueModel.rating.desc())

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(
                "curated_store_search_failed",
                extra={"error": str(e), "category": str(category_filter)},
            )
            return CuratedSearchResult(
                venues=filter_seed_venues(category_filter, search_text),
                degraded=True,
                error=f"Curated store query failed: {e}",
            )

        venues: list[Venue] = []
        for row in rows:
            try:
                venues.append(to_entity(row))
            except ValueError as e:
                logger.warning("curated_row_skipped", extra={"venue_id": row.id, "error": str(e)})
        return CuratedSearchResult(venues=tuple(venues))

    async def create(self, submission: VenueSubmission) -> Venue:
        validate_submission(submission)
        location = place_within(submission.area_center, self._placement_radius_m, self._rng)
        venue = build_submitted_venue(submission, str(uuid.uuid4()), location)

        try:
            async with self._session_factory() as session:
                session.add(to_model(venue))
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise CuratedStoreUnavailableError("create", str(e)) from e

        logger.info(
            "venue_submitted",
            extra={"venue_id": venue.id, "category": venue.category.value, "submitted_by": venue.submitted_by},
        )
        await notify_change(self._publisher, CHANGE_OP_INSERT, venue.id)
        return venue

    async def rate(self, venue_id: str, value: int) -> bool:
        if not MIN_RATING_VALUE <= value <= MAX_RATING_VALUE:
            raise InvalidRatingError(value)

        try:
            async with self._session_factory() as session:
                result = await session.execute(build_rating_update(venue_id, value))
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise CuratedStoreUnavailableError("rate", str(e)) from e

        if not result.rowcount:
            return False
        await notify_change(self._publisher, CHANGE_OP_UPDATE, venue_id)
        return True

    async def upsert(self, venue: Venue) -> Venue:
        try:
            async with self._session_factory() as session:
                row = await session.get(CuratedVenueModel, venue.id)
                if row is None:
                    session.add(to_model(venue))
                    op = CHANGE_OP_INSERT
                else:
                    apply_entity(row, venue)
                    op = CHANGE_OP_UPDATE
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise CuratedStoreUnavailableError("upsert", str(e)) from e

        await notify_change(self._publisher, op, venue.id)
        return venue

    async def delete(self, venue_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(CuratedVenueModel).where(CuratedVenueModel.id == venue_id)
                )
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise CuratedStoreUnavailableError("delete", str(e)) from e

        if not result.rowcount:
            return False
        await notify_change(self._publisher, CHANGE_OP_DELETE, venue_id)
        return True
