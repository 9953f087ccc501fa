"""Realtime Change Feed Ports."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Sequence

from apps.venue_map.domain.entities import Venue

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Sequence[Venue]], Awaitable[None]]

CHANGE_OP_INSERT = "insert"
CHANGE_OP_UPDATE = "update"
CHANGE_OP_DELETE = "delete"


class Subscription:
    """구독 해제 핸들.

    ``async with`` 로 사용하면 스코프 종료 시 해제가 보장됩니다.
    ``close()`` 는 여러 번 호출해도 안전합니다.
    """

    def __init__(self, view_key: str, closer: Callable[[], Awaitable[None]]) -> None:
        self.view_key = view_key
        self._closer = closer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._closer()
        logger.debug("change_feed_unsubscribed", extra={"view_key": self.view_key})

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class ChangePublisherPort(ABC):
    """큐레이션 저장소 변경 알림 발행 Port (CDC 역할).

    구현체:
        - RedisChangePublisher (infrastructure/realtime/)
        - InMemoryChangeFeed (infrastructure/realtime/)
    """

    @abstractmethod
    async def publish_change(self, op: str, venue_id: str) -> None:
        """커밋된 insert/update/delete 한 건을 알립니다."""
        ...


class ChangeFeedPort(ABC):
    """큐레이션 카탈로그 실시간 변경 구독 Port.

    어떤 필터가 활성화되어 있든 모든 변경에 대해 콜백이 호출되며,
    payload 는 카테고리 필터 없는 전체 큐레이션 목록입니다.
    재필터링/재병합은 AggregationEngine 의 책임입니다.
    """

    @abstractmethod
    async def subscribe(self, on_change: ChangeCallback, view_key: str = "map") -> Subscription:
        """구독. 같은 view_key 의 기존 구독은 해제 후 교체됩니다."""
        ...

    @abstractmethod
    async def close_all(self) -> None:
        """모든 구독 해제 (shutdown)."""
        ...
