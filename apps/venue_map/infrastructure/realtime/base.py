"""Shared subscription bookkeeping for change feeds."""

from __future__ import annotations

import logging
from abc import abstractmethod

from apps.venue_map.application.nearby.ports import ChangeCallback, ChangeFeedPort, CuratedStorePort, Subscription
from apps.venue_map.domain.enums import ALL

logger = logging.getLogger(__name__)


class BaseChangeFeed(ChangeFeedPort):
    """view_key 당 구독 1개를 유지하고 변경 시 전체 큐레이션 목록을 전달합니다.

    하위 클래스는 알림 수신 루프의 시작/종료(``_start``/``_stop``)만 구현합니다.
    """

    def __init__(self, store: CuratedStorePort | None = None) -> None:
        self._store = store
        self._subscriptions: dict[str, tuple[ChangeCallback, Subscription]] = {}

    def bind(self, store: CuratedStorePort) -> None:
        """재조회 대상 저장소 지정 (저장소가 피드를 publisher 로 쓰는 경우 생성 후 연결)."""
        self._store = store

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    async def subscribe(self, on_change: ChangeCallback, view_key: str = "map") -> Subscription:
        async def _closer() -> None:
            await self._remove(view_key, subscription)

        subscription = Subscription(view_key, _closer)
        previous = self._subscriptions.get(view_key)
        self._subscriptions[view_key] = (on_change, subscription)
        if previous is not None:
            await previous[1].close()
            logger.info("change_feed_subscription_replaced", extra={"view_key": view_key})

        await self._start()
        logger.debug("change_feed_subscribed", extra={"view_key": view_key})
        return subscription

    async def close_all(self) -> None:
        for _, subscription in list(self._subscriptions.values()):
            await subscription.close()
        await self._stop()

    async def _remove(self, view_key: str, subscription: Subscription) -> None:
        current = self._subscriptions.get(view_key)
        if current is not None and current[1] is subscription:
            del self._subscriptions[view_key]
        if not self._subscriptions:
            await self._stop()

    async def _refresh_subscribers(self, op: str, venue_id: str | None) -> None:
        """변경 1건 → 전체 목록 재조회 → 모든 구독자 콜백."""
        if not self._subscriptions:
            return
        if self._store is None:
            logger.warning("change_feed_store_unbound", extra={"op": op, "venue_id": venue_id})
            return

        result = await self._store.search(ALL)
        if result.degraded:
            # 시드 목록으로 큐레이션 slice 를 덮어쓰지 않음
            logger.warning("change_feed_refresh_skipped", extra={"op": op, "error": result.error})
            return

        for view_key, (callback, _) in list(self._subscriptions.items()):
            try:
                await callback(result.venues)
            except Exception:
                logger.exception("change_feed_callback_failed", extra={"view_key": view_key, "op": op})

    @abstractmethod
    async def _start(self) -> None: ...

    @abstractmethod
    async def _stop(self) -> None: ...
