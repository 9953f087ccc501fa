"""Venue Map API Application

FastAPI 애플리케이션 설정 및 의존성 조립
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from apps.venue_map.presentation.http.controllers import api_router, health_router
from apps.venue_map.presentation.http.errors import register_exception_handlers
from apps.venue_map.setup.config import get_settings
from apps.venue_map.setup.constants import SERVICE_NAME, SERVICE_VERSION
from apps.venue_map.setup.dependencies import Container, build_container
from apps.venue_map.setup.logging import configure_logging
from apps.venue_map.setup.metrics import register_metrics

# =============================================================================
# 초기화
# =============================================================================

# 구조화된 로깅 설정 (ECS JSON 포맷)
configure_logging(service_name=SERVICE_NAME, service_version=SERVICE_VERSION)


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler

    외부에서 주입된 container 가 없으면 설정으로 조립하고, 종료 시 구독/연결을 정리합니다.
    """
    owned = app.state.container is None
    if owned:
        app.state.container = build_container(get_settings())
    try:
        yield
    finally:
        if owned:
            await app.state.container.aclose()
            app.state.container = None


# =============================================================================
# Application Factory
# =============================================================================


def create_app(container: Container | None = None) -> FastAPI:
    """FastAPI 애플리케이션 생성

    Args:
        container: 테스트 등에서 미리 조립한 의존성 (None 이면 lifespan 에서 생성)

    Returns:
        FastAPI: 구성된 애플리케이션 인스턴스
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Sport venue aggregation over OpenStreetMap and a curated catalog",
        version=SERVICE_VERSION,
        docs_url="/api/v1/venues/docs",
        openapi_url="/api/v1/venues/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.container = container

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")

    register_exception_handlers(app)

    # Prometheus 메트릭 등록
    register_metrics(app)

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
