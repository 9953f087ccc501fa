"""Venue Map - 주변 운동 장소 집계/조정 서비스."""
