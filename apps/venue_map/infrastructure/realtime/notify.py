"""Change notification helper shared by curated store adapters."""

from __future__ import annotations

import logging

from apps.venue_map.application.nearby.ports import ChangePublisherPort

logger = logging.getLogger(__name__)


async def notify_change(publisher: ChangePublisherPort | None, op: str, venue_id: str) -> None:
    """커밋 이후 변경 알림. 발행 실패는 쓰기 결과를 되돌리지 않으므로 로그만 남깁니다."""
    if publisher is None:
        return
    try:
        await publisher.publish_change(op, venue_id)
    except Exception:
        logger.exception("change_notification_failed", extra={"op": op, "venue_id": venue_id})
