"""
Base classes for caching.

CacheProtocol is the interface host code programs against. CacheEngine and
DisabledCache both implement it, so call sites do not care whether the cache
is live or switched off.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ttlstore.types import ExpirationPolicy


class CacheProtocol(ABC):
    """Abstract interface for cache implementations."""

    @property
    @abstractmethod
    def policy(self) -> ExpirationPolicy:
        """Expiration policy this cache runs with."""
        ...

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Get a value from the cache, or None if absent or expired."""
        ...

    @abstractmethod
    async def put(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store a value in the cache, replacing any previous entry."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value from the cache. Missing keys are ignored."""
        ...

    async def start(self) -> None:
        """Prepare the cache for use."""

    async def close(self) -> None:
        """Release resources held by the cache."""

    async def __aenter__(self) -> CacheProtocol:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
