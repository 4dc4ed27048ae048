"""Renewal reminder scheduling and deduplication engine."""

__version__ = "1.0.0"
