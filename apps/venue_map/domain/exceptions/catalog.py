"""Curated Catalog Exceptions."""

from apps.venue_map.domain.exceptions.base import VenueMapError


class VenueSubmissionError(VenueMapError):
    """장소 제출 검증 실패."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid venue submission '{field}': {reason}")


class InvalidRatingError(VenueMapError):
    """허용 범위(1~5)를 벗어난 평점."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(f"Rating must be between 1 and 5, got {value}")


class CuratedStoreUnavailableError(VenueMapError):
    """큐레이션 저장소 접근 불가."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(f"Curated store unavailable during {operation}: {reason}")
