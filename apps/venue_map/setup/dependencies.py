"""Dependency Wiring.

설정에 따라 Port 구현체를 조립하고 FastAPI 의존성으로 노출합니다.

    curated_backend=postgres  → SqlaCuratedStore (asyncpg)
    curated_backend=memory    → InMemoryCuratedStore
    realtime_backend=redis    → RedisChangePublisher + RedisChangeFeed
    realtime_backend=memory   → InMemoryChangeFeed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Annotated, Awaitable, Callable

import httpx
from fastapi import Depends
from fastapi.requests import HTTPConnection

from apps.venue_map.application.nearby.ports import (
    ChangeFeedPort,
    ChangePublisherPort,
    CuratedStorePort,
    ExternalIndexClientPort,
)
from apps.venue_map.application.nearby.services import AggregationEngine, GeoQueryBuilder
from apps.venue_map.infrastructure.overpass import OverpassClient, build_http_client
from apps.venue_map.infrastructure.overpass.client import OVERPASS_TIMEOUT
from apps.venue_map.infrastructure.persistence_memory import InMemoryCuratedStore
from apps.venue_map.infrastructure.persistence_postgres import (
    SqlaCuratedStore,
    build_engine,
    build_session_factory,
)
from apps.venue_map.infrastructure.realtime import (
    InMemoryChangeFeed,
    RedisChangeFeed,
    RedisChangePublisher,
)
from apps.venue_map.setup.config import Settings

logger = logging.getLogger(__name__)

Closer = Callable[[], Awaitable[object]]


@dataclass
class Container:
    """애플리케이션 단위 싱글톤 묶음."""

    settings: Settings
    external: ExternalIndexClientPort
    curated: CuratedStorePort
    feed: ChangeFeedPort
    query_builder: GeoQueryBuilder = field(default_factory=GeoQueryBuilder)
    closers: list[Closer] = field(default_factory=list)

    def create_engine(self) -> AggregationEngine:
        """맵 뷰 1개용 AggregationEngine 생성."""
        return AggregationEngine(
            self.external,
            self.curated,
            self.query_builder,
            external_timeout_s=self.settings.overpass_timeout_seconds,
            curated_timeout_s=self.settings.curated_timeout_seconds,
            default_radius_m=self.settings.default_radius_meters,
        )

    async def aclose(self) -> None:
        await self.feed.close_all()
        # 생성 역순으로 정리
        for closer in reversed(self.closers):
            try:
                await closer()
            except Exception:
                logger.exception("resource_close_failed")
        self.closers.clear()


def build_container(settings: Settings) -> Container:
    closers: list[Closer] = []

    http_client = build_http_client(
        httpx.Timeout(settings.overpass_timeout_seconds, connect=OVERPASS_TIMEOUT.connect)
    )
    closers.append(http_client.aclose)
    external = OverpassClient(
        http_client,
        endpoint=settings.overpass_url,
        timeout_seconds=settings.overpass_timeout_seconds,
        rating_policy=settings.external_rating_policy,
    )

    publisher: ChangePublisherPort
    if settings.realtime_backend == "redis":
        import redis.asyncio as aioredis

        redis = aioredis.from_url(settings.redis_url, decode_responses=True)
        closers.append(redis.aclose)
        publisher = RedisChangePublisher(redis, channel=settings.change_channel)
        feed: RedisChangeFeed | InMemoryChangeFeed = RedisChangeFeed(redis, channel=settings.change_channel)
    else:
        feed = InMemoryChangeFeed()
        publisher = feed

    curated: CuratedStorePort
    if settings.curated_backend == "postgres":
        db_engine = build_engine(settings.database_url)
        closers.append(db_engine.dispose)
        curated = SqlaCuratedStore(
            build_session_factory(db_engine),
            publisher=publisher,
            placement_radius_m=settings.submission_placement_radius_m,
        )
    else:
        curated = InMemoryCuratedStore(
            publisher=publisher,
            placement_radius_m=settings.submission_placement_radius_m,
        )
    feed.bind(curated)

    logger.info(
        "container_built",
        extra={
            "curated_backend": settings.curated_backend,
            "realtime_backend": settings.realtime_backend,
            "overpass_url": settings.overpass_url,
        },
    )
    return Container(
        settings=settings,
        external=external,
        curated=curated,
        feed=feed,
        query_builder=GeoQueryBuilder(server_timeout_s=int(settings.overpass_timeout_seconds)),
        closers=closers,
    )


# =============================================================================
# FastAPI 의존성
# =============================================================================


def get_container(connection: HTTPConnection) -> Container:
    return connection.app.state.container


ContainerDep = Annotated[Container, Depends(get_container)]
