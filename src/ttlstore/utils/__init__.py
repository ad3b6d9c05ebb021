"""Utility modules for the cache."""

from ttlstore.utils.clock import Clock, current_timestamp

__all__ = [
    "Clock",
    "current_timestamp",
]
