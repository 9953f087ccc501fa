"""Common HTTP Schemas."""

from pydantic import BaseModel, Field

from apps.venue_map.setup.constants import SERVICE_NAME, SERVICE_VERSION


class HealthResponse(BaseModel):
    """Health Check 응답."""

    status: str = Field(default="healthy", description="서비스 상태")
    service: str = Field(default=SERVICE_NAME)
    version: str = Field(default=SERVICE_VERSION, description="API 버전")


class ErrorResponse(BaseModel):
    """에러 응답."""

    detail: str = Field(..., description="에러 메시지")
    code: str | None = Field(None, description="에러 코드")
