"""HTTP Controllers."""

from fastapi import APIRouter

from apps.venue_map.presentation.http.controllers.health import router as health_router
from apps.venue_map.presentation.http.controllers.live import router as live_router
from apps.venue_map.presentation.http.controllers.venues import router as venues_router

api_router = APIRouter()
api_router.include_router(venues_router)
api_router.include_router(live_router)

__all__ = ["api_router", "health_router"]
