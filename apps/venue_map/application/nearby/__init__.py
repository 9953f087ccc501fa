"""Nearby Venue Aggregation."""
