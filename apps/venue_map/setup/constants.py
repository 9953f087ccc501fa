"""
Service Constants (Single Source of Truth)

정적 상수 정의 - 빌드 타임에 결정되며 환경변수로 변경되지 않음
"""

from __future__ import annotations

import logging

# =============================================================================
# Service Identity
# =============================================================================

SERVICE_NAME = "venue-map-api"
SERVICE_VERSION = "0.3.0"

# =============================================================================
# Logging Constants (12-Factor App Compliance)
# =============================================================================

ENV_KEY_ENVIRONMENT = "ENVIRONMENT"
ENV_KEY_LOG_LEVEL = "LOG_LEVEL"
ENV_KEY_LOG_FORMAT = "LOG_FORMAT"

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"

ECS_VERSION = "8.11.0"

# LogRecord 기본 속성 (extra 가 아닌 것)
EXCLUDED_LOG_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

# 노이즈가 많은 로거 목록 (레벨 조정 대상)
NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "asyncio",
    "sqlalchemy.engine",
)

# =============================================================================
# Search Constants
# =============================================================================

DEFAULT_RADIUS_METERS = 5000
MAX_RADIUS_METERS = 50000

# =============================================================================
# Metrics Constants
# =============================================================================

METRICS_PATH = "/metrics/status"

METRIC_LOAD_DURATION = "venue_map_load_duration_seconds"
METRIC_EXTERNAL_FETCH_TOTAL = "venue_map_external_fetch_total"
METRIC_DEGRADED_LOAD_TOTAL = "venue_map_degraded_load_total"
METRIC_REALTIME_DELTA_TOTAL = "venue_map_realtime_delta_total"

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

# 외부 인덱스 호출은 최대 25초까지 걸릴 수 있음
LOAD_DURATION_BUCKETS: tuple[float, ...] = (0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0, 20.0, 25.0, 30.0)
