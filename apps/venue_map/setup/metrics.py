"""Venue Map Prometheus 메트릭

수집 항목:
- 집계(load) 처리 시간 (outcome별)
- 외부 인덱스 호출 성공/실패 카운터
- 폴백(degraded) 집계 수
- 실시간 delta 처리 수 (applied/buffered/ignored)
"""

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from apps.venue_map.setup.constants import (
    LOAD_DURATION_BUCKETS,
    METRIC_DEGRADED_LOAD_TOTAL,
    METRIC_EXTERNAL_FETCH_TOTAL,
    METRIC_LOAD_DURATION,
    METRIC_REALTIME_DELTA_TOTAL,
    METRICS_PATH,
    STATUS_ERROR,
    STATUS_SUCCESS,
)

REGISTRY = CollectorRegistry(auto_describe=True)

LOAD_DURATION = Histogram(
    name=METRIC_LOAD_DURATION,
    documentation="Time spent aggregating external and curated venues",
    labelnames=["outcome"],  # "ok", "degraded", "empty"
    buckets=LOAD_DURATION_BUCKETS,
    registry=REGISTRY,
)

EXTERNAL_FETCH_TOTAL = Counter(
    name=METRIC_EXTERNAL_FETCH_TOTAL,
    documentation="Total number of external index fetches",
    labelnames=["status"],
    registry=REGISTRY,
)

DEGRADED_LOAD_TOTAL = Counter(
    name=METRIC_DEGRADED_LOAD_TOTAL,
    documentation="Loads served with at least one source degraded",
    labelnames=["reason"],  # "external", "curated", "seed"
    registry=REGISTRY,
)

REALTIME_DELTA_TOTAL = Counter(
    name=METRIC_REALTIME_DELTA_TOTAL,
    documentation="Realtime curated deltas received by the aggregation engine",
    labelnames=["action"],  # "applied", "buffered", "ignored"
    registry=REGISTRY,
)


def observe_load_duration(outcome: str, duration_seconds: float) -> None:
    """집계 처리 시간 기록"""
    LOAD_DURATION.labels(outcome=outcome).observe(duration_seconds)


def increment_external_fetch(success: bool) -> None:
    """외부 인덱스 호출 카운터 증가"""
    EXTERNAL_FETCH_TOTAL.labels(status=STATUS_SUCCESS if success else STATUS_ERROR).inc()


def increment_degraded(reason: str) -> None:
    DEGRADED_LOAD_TOTAL.labels(reason=reason).inc()


def increment_realtime_delta(action: str) -> None:
    REALTIME_DELTA_TOTAL.labels(action=action).inc()


def register_metrics(app: FastAPI) -> None:
    """Prometheus /metrics 엔드포인트 등록"""

    @app.get(METRICS_PATH, include_in_schema=False)
    async def metrics_endpoint() -> Response:
        return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
