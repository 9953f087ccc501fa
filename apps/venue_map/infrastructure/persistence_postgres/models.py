"""SQLAlchemy ORM Models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from apps.venue_map.domain.entities import Venue
from apps.venue_map.domain.enums import VenueCategory, VenueSource
from apps.venue_map.domain.value_objects import Coordinates


class Base(DeclarativeBase):
    """SQLAlchemy Base."""

    pass


class CuratedVenueModel(Base):
    """큐레이션 장소 ORM 모델."""

    __tablename__ = "venues"
    __table_args__ = (Index("ix_venues_sponsored_rating", "is_sponsored", "rating"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_sponsored: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    address: Mapped[str | None] = mapped_column(Text)
    contact_phone: Mapped[str | None] = mapped_column(String(64))
    website: Mapped[str | None] = mapped_column(Text)
    hours: Mapped[str | None] = mapped_column(String(128))
    amenity_tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    submitted_by: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


def to_entity(row: CuratedVenueModel) -> Venue:
    """ORM row → Venue.

    Raises:
        ValueError: 알 수 없는 카테고리, 범위를 벗어난 좌표/평점
    """
    return Venue(
        id=row.id,
        name=row.name,
        category=VenueCategory(row.category),
        location=Coordinates(latitude=row.latitude, longitude=row.longitude),
        source=VenueSource.CURATED,
        rating=row.rating or 0.0,
        review_count=row.review_count or 0,
        description=row.description or "",
        image_url=row.image_url or "",
        verified=bool(row.verified),
        sponsored=bool(row.is_sponsored),
        address=row.address,
        contact_phone=row.contact_phone,
        website=row.website,
        hours=row.hours,
        amenity_tags=tuple(row.amenity_tags or ()),
        submitted_by=row.submitted_by,
    )


def apply_entity(row: CuratedVenueModel, venue: Venue) -> CuratedVenueModel:
    """Venue 값을 ORM row 에 덮어씁니다 (id 제외)."""
    row.name = venue.name
    row.category = venue.category.value
    row.latitude = venue.location.latitude
    row.longitude = venue.location.longitude
    row.rating = venue.rating
    row.review_count = venue.review_count
    row.description = venue.description
    row.image_url = venue.image_url
    row.verified = venue.verified
    row.is_sponsored = venue.sponsored
    row.address = venue.address
    row.contact_phone = venue.contact_phone
    row.website = venue.website
    row.hours = venue.hours
    row.amenity_tags = list(venue.amenity_tags)
    row.submitted_by = venue.submitted_by
    return row


def to_model(venue: Venue) -> CuratedVenueModel:
    return apply_entity(CuratedVenueModel(id=venue.id), venue)
