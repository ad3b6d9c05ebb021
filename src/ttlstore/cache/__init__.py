"""
Cache package.

- store.py: SQLiteStore, the durable key -> (value, expiration) table
- serialization.py: orjson value encoding
- engine.py: CacheEngine (background or lazy expiration) and DisabledCache
- open_cache(): builds the right implementation from Settings
"""

from __future__ import annotations

from ttlstore.cache.base import CacheProtocol
from ttlstore.cache.engine import CacheEngine, DisabledCache
from ttlstore.cache.store import SQLiteStore
from ttlstore.config import Settings, get_settings
from ttlstore.logging import get_logger, set_log_level
from ttlstore.types import ExpirationPolicy
from ttlstore.utils.clock import Clock, current_timestamp

logger = get_logger(__name__)


async def open_cache(
    settings: Settings | None = None,
    *,
    store: SQLiteStore | None = None,
    clock: Clock = current_timestamp,
) -> CacheProtocol:
    """Build and start a cache from settings.

    Args:
        settings: Cache settings; defaults to get_settings().
        store: Store to use instead of SQLiteStore(settings.db_path).
            Never touched when the cache is disabled.
        clock: Time source for the engine.

    Returns:
        A started cache. Call close() (or use `async with`) when done.
    """
    settings = settings or get_settings()
    set_log_level(settings.LOG_LEVEL)
    logger.debug("Opening cache", **settings.display())

    if settings.policy is ExpirationPolicy.DISABLED:
        logger.info("Cache disabled; get returns None and writes are dropped")
        return DisabledCache()

    engine = CacheEngine(
        store or SQLiteStore(settings.db_path),
        expire_on_get=settings.expire_on_get,
        expiration_interval=settings.cache_expiration_interval,
        default_ttl=settings.default_ttl,
        clock=clock,
    )
    await engine.start()
    return engine


__all__ = [
    "CacheEngine",
    "CacheProtocol",
    "DisabledCache",
    "SQLiteStore",
    "open_cache",
]
