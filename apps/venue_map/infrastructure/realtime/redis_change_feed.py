"""Redis Pub/Sub Change Feed.

큐레이션 저장소 쓰기 → RedisChangePublisher → 채널 → RedisChangeFeed → 구독자

```
SqlaCuratedStore ──publish──▶ venue_map:curated:changes
                                      │
                                      ▼
                       RedisChangeFeed (listener task)
                                      │  store.search("All")
                                      ▼
                       AggregationEngine.on_realtime_delta
```

메시지 형식: ``{"op": "insert|update|delete", "venue_id": "...", "ts": 1700000000.0}``
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from typing import TYPE_CHECKING, Any

from redis.backoff import ExponentialBackoff
from redis.exceptions import RedisError

from apps.venue_map.application.nearby.ports import ChangePublisherPort, CuratedStorePort
from apps.venue_map.infrastructure.realtime.base import BaseChangeFeed

if TYPE_CHECKING:
    from redis.asyncio import Redis
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)

DEFAULT_CHANGE_CHANNEL = "venue_map:curated:changes"

# 연결 끊김 후 재구독 대기: 1s → 2s → 4s ... 최대 30s
RESUBSCRIBE_BASE_DELAY = 0.5
RESUBSCRIBE_MAX_DELAY = 30.0


def encode_change(op: str, venue_id: str) -> str:
    return json.dumps({"op": op, "venue_id": venue_id, "ts": time.time()})


def decode_change(data: Any) -> tuple[str, str | None] | None:
    """Pub/Sub 메시지 data → (op, venue_id). 형식이 맞지 않으면 None."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    try:
        payload = json.loads(data)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict) or not payload.get("op"):
        return None
    return str(payload["op"]), payload.get("venue_id")


class RedisChangePublisher(ChangePublisherPort):
    """커밋된 변경 1건을 Redis 채널로 발행."""

    def __init__(self, redis: "Redis", channel: str = DEFAULT_CHANGE_CHANNEL) -> None:
        self._redis = redis
        self._channel = channel

    async def publish_change(self, op: str, venue_id: str) -> None:
        receivers = await self._redis.publish(self._channel, encode_change(op, venue_id))
        logger.debug(
            "curated_change_published",
            extra={"channel": self._channel, "op": op, "venue_id": venue_id, "receivers": receivers},
        )


class RedisChangeFeed(BaseChangeFeed):
    """Redis 채널 구독 기반 ChangeFeedPort 구현체.

    구독자가 한 명 이상일 때만 리스너 태스크가 실행됩니다.
    메시지는 수신 순서대로 하나씩 처리됩니다.
    """

    def __init__(
        self,
        redis: "Redis",
        store: CuratedStorePort | None = None,
        channel: str = DEFAULT_CHANGE_CHANNEL,
        backoff: ExponentialBackoff | None = None,
    ) -> None:
        super().__init__(store)
        self._redis = redis
        self._channel = channel
        self._backoff = backoff or ExponentialBackoff(cap=RESUBSCRIBE_MAX_DELAY, base=RESUBSCRIBE_BASE_DELAY)
        self._pubsub: PubSub | None = None
        self._listener: asyncio.Task | None = None

    @property
    def listening(self) -> bool:
        return self._listener is not None and not self._listener.done()

    async def _start(self) -> None:
        if self.listening:
            return
        if self._listener is not None:
            # 이전 리스너가 끝난 상태 (채널 구독이 풀림)
            await self._stop()
        self._pubsub = await self._subscribe()
        self._listener = asyncio.create_task(self._listen(), name="redis-change-feed")
        logger.info("change_feed_listening", extra={"channel": self._channel})

    async def _stop(self) -> None:
        listener, self._listener = self._listener, None
        pubsub, self._pubsub = self._pubsub, None
        if listener is not None:
            listener.cancel()
            if listener is not asyncio.current_task():
                with contextlib.suppress(asyncio.CancelledError):
                    await listener
        if pubsub is not None:
            try:
                await pubsub.unsubscribe(self._channel)
            except (RedisError, OSError):
                logger.warning("change_feed_unsubscribe_failed", extra={"channel": self._channel}, exc_info=True)
            await self._discard(pubsub)
            logger.info("change_feed_stopped", extra={"channel": self._channel})

    async def _subscribe(self) -> "PubSub":
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        return pubsub

    async def _discard(self, pubsub: "PubSub") -> None:
        with contextlib.suppress(RedisError, OSError):
            await pubsub.aclose()

    async def _listen(self) -> None:
        """수신 루프. 연결이 끊기면 backoff 후 새 PubSub 으로 재구독합니다.

        ``_stop`` 의 cancel 로 끝나거나, 채널 구독이 풀려 ``listen()`` 이 끝나면 종료
        (다음 subscribe 때 ``_start`` 가 재시작).
        """
        failures = 0
        while True:
            try:
                if self._pubsub is None:
                    self._pubsub = await self._subscribe()
                    logger.info("change_feed_resubscribed", extra={"channel": self._channel, "attempt": failures})
                async for message in self._pubsub.listen():
                    failures = 0
                    await self.handle_message(message)
                return
            except (RedisError, OSError) as e:
                failures += 1
                logger.warning(
                    "change_feed_connection_lost",
                    extra={"channel": self._channel, "attempt": failures, "error": repr(e)},
                )
            except Exception:
                failures += 1
                logger.exception("change_feed_listener_failed", extra={"channel": self._channel, "attempt": failures})

            pubsub, self._pubsub = self._pubsub, None
            if pubsub is not None:
                await self._discard(pubsub)
            await asyncio.sleep(self._backoff.compute(failures))

    async def handle_message(self, message: dict[str, Any]) -> None:
        if message.get("type") != "message":
            return
        change = decode_change(message.get("data"))
        if change is None:
            logger.warning("change_feed_malformed_message", extra={"channel": self._channel})
            return
        op, venue_id = change
        try:
            await self._refresh_subscribers(op, venue_id)
        except Exception:
            logger.exception("change_feed_refresh_failed", extra={"op": op, "venue_id": venue_id})
