"""Venue Controller.

주변 장소 조회, 장소 제출, 평점 반영 엔드포인트입니다.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Response, status

from apps.venue_map.domain.entities import VenueSubmission
from apps.venue_map.domain.enums import VenueCategory, parse_category_filter
from apps.venue_map.domain.services import annotate_distances
from apps.venue_map.domain.value_objects import Coordinates
from apps.venue_map.presentation.http.schemas import (
    NearbyVenuesResponse,
    RatingRequest,
    VenueEntry,
    VenueSubmissionRequest,
)
from apps.venue_map.setup.constants import MAX_RADIUS_METERS
from apps.venue_map.setup.dependencies import ContainerDep

router = APIRouter(prefix="/venues", tags=["venues"])


@router.get(
    "/nearby",
    response_model=NearbyVenuesResponse,
    summary="주변 운동 장소 조회",
    description="""
    외부 지리 인덱스(OpenStreetMap)와 큐레이션 카탈로그를 동시에 조회해 병합합니다.

    - 스폰서 장소가 항상 먼저 노출됩니다.
    - 외부 인덱스 장애 시 큐레이션 결과만 반환하며 `diagnostics.outcome` 이 `degraded` 가 됩니다.
    """,
)
async def nearby_venues(
    container: ContainerDep,
    lat: float = Query(..., ge=-90, le=90, description="사용자 위도"),
    lon: float = Query(..., ge=-180, le=180, description="사용자 경도"),
    category: str | None = Query(None, description="카테고리 (미지정 시 All)"),
    q: str | None = Query(None, max_length=100, description="이름/설명 검색어"),
    radius: int | None = Query(None, gt=0, le=MAX_RADIUS_METERS, description="검색 반경 (m)"),
) -> NearbyVenuesResponse:
    try:
        category_filter = parse_category_filter(category)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    center = Coordinates(latitude=lat, longitude=lon)
    engine = container.create_engine()
    snapshot = await engine.load(center, category_filter, q, radius)
    return NearbyVenuesResponse.from_snapshot(snapshot, center)


@router.post(
    "",
    response_model=VenueEntry,
    status_code=status.HTTP_201_CREATED,
    summary="장소 제출",
    responses={422: {"description": "요청 데이터 유효성 검사 실패"}},
)
async def submit_venue(payload: VenueSubmissionRequest, container: ContainerDep) -> VenueEntry:
    """제출된 장소는 검수 전(verified=False) 상태로 지역 중심 반경 안에 배치됩니다."""
    try:
        category_filter = parse_category_filter(payload.category)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    if not isinstance(category_filter, VenueCategory):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="A concrete category is required",
        )

    area_center = Coordinates(latitude=payload.latitude, longitude=payload.longitude)
    venue = await container.curated.create(
        VenueSubmission(
            name=payload.name,
            category=category_filter,
            description=payload.description,
            area_center=area_center,
            submitter_id=payload.submitter_id,
            address=payload.address,
            contact_info=payload.contact_info,
        )
    )
    return VenueEntry.from_domain(annotate_distances([venue], area_center)[0])


@router.post(
    "/{venue_id}/ratings",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="평점 반영",
    responses={404: {"description": "알 수 없는 장소"}},
)
async def rate_venue(venue_id: str, payload: RatingRequest, container: ContainerDep) -> Response:
    if not await container.curated.rate(venue_id, payload.value):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Venue not found: {venue_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
