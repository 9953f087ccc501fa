"""Infrastructure Layer."""
