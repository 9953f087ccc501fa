"""Base Domain Exception."""


class VenueMapError(Exception):
    """Venue Map 도메인 예외 베이스 클래스."""

    pass
