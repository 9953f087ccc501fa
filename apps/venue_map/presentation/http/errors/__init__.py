"""HTTP Error Handling."""

from apps.venue_map.presentation.http.errors.handlers import (
    register_exception_handlers,
    translate_domain_error,
)

__all__ = ["register_exception_handlers", "translate_domain_error"]
