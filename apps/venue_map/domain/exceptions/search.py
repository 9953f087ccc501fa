"""Search Exceptions."""

from apps.venue_map.domain.exceptions.base import VenueMapError


class InvalidSearchRadiusError(VenueMapError):
    """0 이하의 검색 반경."""

    def __init__(self, radius_m: float) -> None:
        self.radius_m = radius_m
        super().__init__(f"Search radius must be positive, got {radius_m}")


class ExternalIndexUnavailableError(VenueMapError):
    """외부 지리 인덱스 호출 실패 (네트워크/타임아웃/비정상 응답)."""

    pass
