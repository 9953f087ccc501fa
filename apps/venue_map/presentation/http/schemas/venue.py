"""Venue HTTP Schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from apps.venue_map.application.nearby.dto import AggregationSnapshot
from apps.venue_map.domain.services import VenueWithDistance, annotate_distances
from apps.venue_map.domain.value_objects import Coordinates


class VenueEntry(BaseModel):
    """장소 응답 스키마 (사용자 위치 기준 거리 포함)."""

    id: str
    name: str
    category: str
    category_label: str
    source: str
    latitude: float
    longitude: float
    distance_km: float
    distance_text: str
    rating: float
    review_count: int
    description: str
    image_url: str
    verified: bool
    sponsored: bool
    address: str | None = None
    contact_phone: str | None = None
    website: str | None = None
    hours: str | None = None
    amenity_tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, item: VenueWithDistance) -> VenueEntry:
        venue = item.venue
        return cls(
            id=venue.id,
            name=venue.name,
            category=venue.category.value,
            category_label=venue.category.label,
            source=venue.source.value,
            latitude=venue.location.latitude,
            longitude=venue.location.longitude,
            distance_km=round(item.distance_km, 3),
            distance_text=item.distance_text,
            rating=venue.rating,
            review_count=venue.review_count,
            description=venue.description,
            image_url=venue.image_url,
            verified=venue.verified,
            sponsored=venue.sponsored,
            address=venue.address,
            contact_phone=venue.contact_phone,
            website=venue.website,
            hours=venue.hours,
            amenity_tags=list(venue.amenity_tags),
        )


class DiagnosticsEntry(BaseModel):
    """집계 진단 정보 (축소 vs 정상 0건 구분)."""

    outcome: str = Field(..., description="ok | degraded | empty")
    degraded: bool
    seed_fallback: bool
    external_error: str | None = None
    curated_error: str | None = None
    external_count: int
    curated_count: int


class NearbyVenuesResponse(BaseModel):
    venues: list[VenueEntry]
    count: int
    state: str
    generation: int
    category: str
    diagnostics: DiagnosticsEntry

    @classmethod
    def from_snapshot(cls, snapshot: AggregationSnapshot, user_location: Coordinates) -> NearbyVenuesResponse:
        diagnostics = snapshot.diagnostics
        entries = [VenueEntry.from_domain(item) for item in annotate_distances(snapshot.venues, user_location)]
        return cls(
            venues=entries,
            count=len(entries),
            state=snapshot.state.value,
            generation=snapshot.generation,
            category=str(getattr(snapshot.category_filter, "value", snapshot.category_filter)),
            diagnostics=DiagnosticsEntry(
                outcome=diagnostics.outcome,
                degraded=diagnostics.degraded,
                seed_fallback=diagnostics.seed_fallback,
                external_error=diagnostics.external_error,
                curated_error=diagnostics.curated_error,
                external_count=diagnostics.external_count,
                curated_count=diagnostics.curated_count,
            ),
        )


class VenueSubmissionRequest(BaseModel):
    """장소 제출 요청."""

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., description="카테고리 값/이름/라벨 (예: gym, Yoga Studio)")
    description: str = Field(default="", max_length=2000)
    latitude: float = Field(..., ge=-90, le=90, description="제출 지역 중심 위도")
    longitude: float = Field(..., ge=-180, le=180, description="제출 지역 중심 경도")
    submitter_id: str = Field(..., min_length=1, max_length=64)
    address: str | None = Field(default=None, max_length=500)
    contact_info: str | None = Field(default=None, max_length=200)


class RatingRequest(BaseModel):
    value: int = Field(..., ge=1, le=5, description="평점 (1~5)")


class LiveViewRequest(BaseModel):
    """WebSocket 라이브 뷰 조회 조건."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    category: str | None = None
    q: str | None = None
    radius: int | None = Field(default=None, gt=0)
