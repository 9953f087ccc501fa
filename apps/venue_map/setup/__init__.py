"""Venue Map Setup (config, logging, metrics, dependencies)."""
