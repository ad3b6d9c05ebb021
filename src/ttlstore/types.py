"""
Core types for the cache.

- ExpirationPolicy: which sweep strategy an engine runs
- CacheEntry: an expiring key/value record
- SweepResult: outcome of one expiration sweep
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEFAULT_TTL_SECONDS = 300
DEFAULT_EXPIRATION_INTERVAL = 60


class ExpirationPolicy(str, Enum):
    """How expired entries get physically removed."""

    BACKGROUND = "background"  # Periodic sweeper task
    LAZY = "lazy"  # Sweep before every get
    DISABLED = "disabled"  # No storage access at all

    @classmethod
    def from_options(cls, disable: bool = False, expire_on_get: bool = False) -> ExpirationPolicy:
        """Derive the policy from the cache options.

        `disable` short-circuits everything; otherwise `expire_on_get`
        selects lazy over background sweeping.
        """
        if disable:
            return cls.DISABLED
        if expire_on_get:
            return cls.LAZY
        return cls.BACKGROUND


@dataclass(frozen=True)
class CacheEntry:
    """A cached value with its absolute expiration time.

    Entries are never mutated; put() replaces the whole row.
    """

    key: str
    value: Any
    expires_at: int  # Unix timestamp, whole seconds

    @classmethod
    def create(cls, key: str, value: Any, now: int, ttl_seconds: int) -> CacheEntry:
        """Build an entry expiring ttl_seconds after now."""
        return cls(key=key, value=value, expires_at=now + ttl_seconds)

    def is_expired(self, now: int) -> bool:
        """An entry is logically absent once expires_at <= now."""
        return self.expires_at <= now

    def remaining(self, now: int) -> int:
        """Seconds left before expiry, floored at zero."""
        return max(0, self.expires_at - now)


@dataclass(frozen=True)
class SweepResult:
    """Outcome of a single expiration sweep."""

    removed: int
    swept_at: int
