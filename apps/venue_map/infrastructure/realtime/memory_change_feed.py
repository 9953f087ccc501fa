"""In-Process Change Feed.

ChangePublisherPort + ChangeFeedPort 를 함께 구현합니다 (로컬 개발/테스트용).
발행된 알림은 큐에 쌓이고 단일 워커 태스크가 순서대로 처리합니다.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from apps.venue_map.application.nearby.ports import ChangePublisherPort, CuratedStorePort
from apps.venue_map.infrastructure.realtime.base import BaseChangeFeed

logger = logging.getLogger(__name__)


class InMemoryChangeFeed(BaseChangeFeed, ChangePublisherPort):
    def __init__(self, store: CuratedStorePort | None = None) -> None:
        super().__init__(store)
        self._queue: asyncio.Queue[tuple[str, str]] = asyncio.Queue()
        self._worker: asyncio.Task | None = None

    async def publish_change(self, op: str, venue_id: str) -> None:
        if self._worker is None:
            return
        self._queue.put_nowait((op, venue_id))

    async def drain(self) -> None:
        """대기 중인 알림이 모두 처리될 때까지 대기."""
        if self._worker is not None:
            await self._queue.join()

    async def _start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run(), name="in-memory-change-feed")

    async def _stop(self) -> None:
        worker, self._worker = self._worker, None
        if worker is None:
            return
        worker.cancel()
        if worker is asyncio.current_task():
            # 콜백 안에서 마지막 구독을 해제한 경우
            return
        with contextlib.suppress(asyncio.CancelledError):
            await worker
        # 구독자가 없으므로 남은 알림은 버림
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()

    async def _run(self) -> None:
        while True:
            op, venue_id = await self._queue.get()
            try:
                await self._refresh_subscribers(op, venue_id)
            except Exception:
                logger.exception("change_feed_refresh_failed", extra={"op": op, "venue_id": venue_id})
            finally:
                self._queue.task_done()
