"""Live Map View (WebSocket).

연결 1개 = 맵 뷰 1개 = AggregationEngine 1개 + 변경 피드 구독 1개.

클라이언트 → 서버: ``{"lat", "lon", "category"?, "q"?, "radius"?}`` (조회 조건 변경 시마다)
서버 → 클라이언트: NearbyVenuesResponse JSON (load 완료 및 큐레이션 변경 시마다)
                   또는 ``{"error": "..."}`` (잘못된 요청, 연결은 유지)

새 조회 조건이 오면 진행 중이던 load 는 취소되고 새 load 가 이어받습니다.
모든 전송은 ``outbox`` 하나를 거쳐 순서대로 나갑니다.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import uuid
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from apps.venue_map.application.nearby.dto import AggregationSnapshot
from apps.venue_map.domain.enums import CategoryFilter, parse_category_filter
from apps.venue_map.domain.exceptions import VenueMapError
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.presentation.http.schemas import LiveViewRequest, NearbyVenuesResponse
from apps.venue_map.setup.dependencies import ContainerDep
from apps.venue_map.setup.logging import bind_log_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


def _render(snapshot: AggregationSnapshot) -> dict[str, Any] | None:
    if snapshot.center is None:
        return None
    return NearbyVenuesResponse.from_snapshot(snapshot, snapshot.center).model_dump(mode="json")


def _parse_request(text: str) -> tuple[LiveViewRequest, CategoryFilter]:
    """Raises: ValidationError / ValueError (JSON 형식 오류 포함)"""
    request = LiveViewRequest.model_validate(json.loads(text))
    return request, parse_category_filter(request.category)


async def _cancel(task: asyncio.Task | None) -> None:
    if task is None or task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


@router.websocket("/venues/live")
async def live_venues(websocket: WebSocket, container: ContainerDep) -> None:
    await websocket.accept()
    view_key = f"ws-{uuid.uuid4()}"
    engine = container.create_engine()
    outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def on_publish(snapshot: AggregationSnapshot) -> None:
        payload = _render(snapshot)
        if payload is not None:
            outbox.put_nowait(payload)

    async def pump() -> None:
        while True:
            await websocket.send_json(await outbox.get())

    async def run_load(request: LiveViewRequest, category_filter: CategoryFilter) -> None:
        center = Coordinates(latitude=request.lat, longitude=request.lon)
        try:
            await engine.load(center, category_filter, request.q, request.radius)
        except VenueMapError as e:
            outbox.put_nowait({"error": str(e)})

    unsubscribe = engine.subscribe(on_publish)
    load_task: asyncio.Task | None = None

    with bind_log_context(view_key=view_key):
        sender = asyncio.create_task(pump())
        try:
            async with await engine.attach_feed(container.feed, view_key=view_key):
                while True:
                    text = await websocket.receive_text()
                    try:
                        request, category_filter = _parse_request(text)
                    except (ValidationError, ValueError) as e:
                        outbox.put_nowait({"error": str(e)})
                        continue

                    await _cancel(load_task)
                    load_task = asyncio.create_task(run_load(request, category_filter))
        except WebSocketDisconnect:
            logger.debug("live_view_disconnected")
        finally:
            unsubscribe()
            await _cancel(load_task)
            await _cancel(sender)
