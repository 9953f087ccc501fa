"""Venue Map Application Layer."""
