"""Domain Exception → HTTP Response."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from apps.venue_map.domain.exceptions import (
    CuratedStoreUnavailableError,
    InvalidRatingError,
    InvalidSearchRadiusError,
    VenueMapError,
    VenueSubmissionError,
)
from apps.venue_map.presentation.http.schemas import ErrorResponse

logger = logging.getLogger(__name__)

# 순서대로 isinstance 검사 (구체 타입 먼저)
ERROR_STATUS: tuple[tuple[type[VenueMapError], int, str], ...] = (
    (InvalidSearchRadiusError, status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_radius"),
    (VenueSubmissionError, status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_submission"),
    (InvalidRatingError, status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_rating"),
    (CuratedStoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "curated_store_unavailable"),
)


def translate_domain_error(exc: VenueMapError) -> tuple[int, str]:
    for error_type, status_code, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code, code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "venue_map_error"


async def _handle_domain_error(request: Request, exc: VenueMapError) -> JSONResponse:
    status_code, code = translate_domain_error(exc)
    if status_code >= 500:
        logger.error("domain_error", extra={"code": code, "path": request.url.path, "error": str(exc)})
    body = ErrorResponse(detail=str(exc), code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VenueMapError, _handle_domain_error)  # type: ignore[arg-type]
