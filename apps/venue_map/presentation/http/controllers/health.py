"""Health Check Controller."""

from __future__ import annotations

from fastapi import APIRouter

from apps.venue_map.presentation.http.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """헬스체크 엔드포인트."""
    return HealthResponse()


@router.get("/ping")
async def ping() -> dict:
    """Ping 엔드포인트."""
    return {"pong": True}
