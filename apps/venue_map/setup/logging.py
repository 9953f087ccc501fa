"""
Structured Logging (ECS JSON)

Fluent Bit 이 stdout 을 수집해 Elasticsearch 로 전송합니다.
라이브 뷰처럼 오래 사는 작업은 ``bind_log_context`` 로 view_key 등을 묶어 두면
그 안에서 남긴 모든 로그의 labels 에 함께 실립니다.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator

from apps.venue_map.setup.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    ECS_VERSION,
    ENV_KEY_ENVIRONMENT,
    ENV_KEY_LOG_FORMAT,
    ENV_KEY_LOG_LEVEL,
    EXCLUDED_LOG_RECORD_ATTRS,
    NOISY_LOGGERS,
    SERVICE_NAME,
    SERVICE_VERSION,
)

TEXT_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_log_context: ContextVar[dict[str, Any]] = ContextVar("venue_map_log_context", default={})


@contextmanager
def bind_log_context(**fields: Any) -> Iterator[None]:
    """블록 안에서 남기는 로그에 공통 필드를 덧붙입니다 (중첩 가능)."""
    token = _log_context.set({**_log_context.get(), **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


def _labels(record: logging.LogRecord) -> dict[str, Any]:
    labels = dict(_log_context.get())
    labels.update(
        (key, value) for key, value in vars(record).items() if key not in EXCLUDED_LOG_RECORD_ATTRS
    )
    return labels


class ECSJsonFormatter(logging.Formatter):
    """Elastic Common Schema (ECS) 한 줄 JSON."""

    def __init__(
        self,
        service_name: str = SERVICE_NAME,
        service_version: str = SERVICE_VERSION,
        environment: str = DEFAULT_ENVIRONMENT,
    ):
        super().__init__()
        self._service = {
            "service.name": service_name,
            "service.version": service_version,
            "service.environment": environment,
        }

    def format(self, record: logging.LogRecord) -> str:
        document: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "message": record.getMessage(),
            "log.level": record.levelname.lower(),
            "log.logger": record.name,
            "ecs.version": ECS_VERSION,
            **self._service,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            document["error.type"] = exc_type.__name__ if exc_type else None
            document["error.message"] = str(exc_value) if exc_value else None
            document["error.stack_trace"] = self.formatException(record.exc_info)

        labels = _labels(record)
        if labels:
            document["labels"] = labels
        return json.dumps(document, ensure_ascii=False, default=str)


def _build_handler(level: int, use_json: bool, environment: str, service_name: str, service_version: str):
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(ECSJsonFormatter(service_name, service_version, environment))
    else:
        handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def configure_logging(
    service_name: str = SERVICE_NAME,
    service_version: str = SERVICE_VERSION,
    log_level: str | None = None,
    json_format: bool | None = None,
) -> None:
    """루트 로거를 stdout 핸들러 하나로 재설정합니다.

    Args:
        service_name: 서비스 이름
        service_version: 서비스 버전
        log_level: 로그 레벨 (미지정 시 LOG_LEVEL 환경변수)
        json_format: JSON 포맷 여부 (미지정 시 LOG_FORMAT 환경변수)
    """
    level_name = (log_level or os.getenv(ENV_KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    if json_format is None:
        json_format = os.getenv(ENV_KEY_LOG_FORMAT, DEFAULT_LOG_FORMAT) == "json"

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(level)
    root.addHandler(
        _build_handler(
            level,
            json_format,
            os.getenv(ENV_KEY_ENVIRONMENT, DEFAULT_ENVIRONMENT),
            service_name,
            service_version,
        )
    )

    # uvicorn access / httpx / SQL 로그는 WARNING 이상만
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
