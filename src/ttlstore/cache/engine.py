"""
Expiration-aware cache engine.

CacheEngine serializes values, computes expiry times and runs one of two
expiration policies, fixed for the engine's lifetime:

- background: an asyncio task sweeps expired rows every expiration_interval
  seconds, independent of callers.
- lazy: every get() sweeps synchronously before its lookup; no task runs.

DisabledCache is the third configuration: it never touches storage.
"""

from __future__ import annotations

import asyncio
from typing import Any

from ttlstore.cache.base import CacheProtocol
from ttlstore.cache.serialization import decode_value, encode_value
from ttlstore.cache.store import SQLiteStore
from ttlstore.exceptions import ConfigurationError
from ttlstore.logging import get_logger, log_context
from ttlstore.types import (
    DEFAULT_EXPIRATION_INTERVAL,
    DEFAULT_TTL_SECONDS,
    CacheEntry,
    ExpirationPolicy,
    SweepResult,
)
from ttlstore.utils.clock import Clock, current_timestamp

logger = get_logger(__name__)

# Largest value a SQLite INTEGER column holds
MAX_EXPIRES_AT = 2**63 - 1


class CacheEngine(CacheProtocol):
    """Persistent TTL cache over a SQLiteStore.

    Construct once in the host application and pass it to call sites.
    Use as an async context manager, or call start() and close() explicitly:

        async with CacheEngine(SQLiteStore(path)) as cache:
            await cache.put("a", {"x": 1}, ttl_seconds=5)
            await cache.get("a")

    All store round-trips, including sweeps, are serialized by one lock so a
    predicate delete never interleaves with a point operation.
    """

    def __init__(
        self,
        store: SQLiteStore,
        expire_on_get: bool = False,
        expiration_interval: float = DEFAULT_EXPIRATION_INTERVAL,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        clock: Clock = current_timestamp,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Durable table holding the entries.
            expire_on_get: Sweep before every get instead of on a timer.
            expiration_interval: Seconds between background sweeps.
            default_ttl: TTL used when put() gets none (or a non-positive one).
            clock: Time source returning whole Unix seconds.
        """
        if expiration_interval <= 0:
            raise ConfigurationError(
                "Expiration interval must be positive",
                context={"expiration_interval": expiration_interval},
            )
        if default_ttl <= 0:
            raise ConfigurationError(
                "Default TTL must be positive", context={"default_ttl": default_ttl}
            )

        self.store = store
        self.expiration_interval = expiration_interval
        self.default_ttl = default_ttl
        self._clock = clock
        self._policy = ExpirationPolicy.from_options(expire_on_get=expire_on_get)
        self._lock = asyncio.Lock()
        self._sweeper: asyncio.Task[None] | None = None
        self._started = False
        self._schema_ready = False

    @property
    def policy(self) -> ExpirationPolicy:
        return self._policy

    @property
    def is_sweeping(self) -> bool:
        """Whether the background sweeper task is running."""
        return self._sweeper is not None and not self._sweeper.done()

    async def start(self) -> None:
        """Create the schema and, in background mode, start the sweeper.

        Safe to call more than once.
        """
        if self._started:
            return

        await self._ensure_schema()
        self._started = True
        logger.info("Cache initialized", db_path=str(self.store.db_path), policy=self._policy.value)

        if self._policy is ExpirationPolicy.BACKGROUND:
            self._sweeper = asyncio.create_task(
                self._sweep_loop(), name=f"ttlstore-sweeper-{self.store.name}"
            )
            logger.info(
                "Will expire objects periodically",
                interval_seconds=self.expiration_interval,
            )

    async def close(self) -> None:
        """Stop the sweeper task. Safe to call more than once."""
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None:
            sweeper.cancel()
            # wait() leaves a cancellation of the caller to propagate
            await asyncio.wait({sweeper})
            logger.debug("Sweeper stopped", db_path=str(self.store.db_path))
        self._started = False

    async def get(self, key: str) -> Any | None:
        """Get a value, or None if the key is absent or expired.

        Raises:
            CorruptEntry: If the stored value cannot be decoded.
            StorageUnavailable: If the store cannot be queried.
        """
        with log_context(cache_name=self.store.name, operation="get"):
            await self._ensure_schema()
            if self._policy is ExpirationPolicy.LAZY:
                await self.sweep()

            async with self._lock:
                row = await self.store.get(key)
            now = self._clock()

            if row is None:
                logger.info("Cache MISS", key=key)
                return None

            raw, expires_at = row
            stored = CacheEntry(key=key, value=raw, expires_at=expires_at)
            if stored.is_expired(now):
                # Expired rows wait for the next sweep
                logger.info("Cache MISS", key=key, expired=True)
                return None

            value = decode_value(key, stored.value)
            logger.info("Cache HIT", key=key, remaining_seconds=stored.remaining(now))
            return value

    async def put(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store a value, replacing any existing entry for key.

        A missing, zero or negative ttl_seconds falls back to default_ttl.

        Raises:
            ConfigurationError: If ttl_seconds is not an integer, or puts the
                expiration beyond what SQLite can store.
            SerializationError: If the value cannot be encoded. Nothing is written.
            StorageUnavailable: If the store cannot be written.
        """
        with log_context(cache_name=self.store.name, operation="put"):
            now = self._clock()
            ttl = self._resolve_ttl(ttl_seconds, now)
            serialized = encode_value(key, value)
            entry = CacheEntry.create(key, value, now=now, ttl_seconds=ttl)

            await self._ensure_schema()
            async with self._lock:
                await self.store.upsert(key, serialized, entry.expires_at)

            logger.info("Cache PUT", key=key, ttl_seconds=ttl, expires_at=entry.expires_at)

    async def delete(self, key: str) -> None:
        """Delete a key. Deleting a missing key is a no-op."""
        with log_context(cache_name=self.store.name, operation="delete"):
            await self._ensure_schema()
            async with self._lock:
                removed = await self.store.delete(key)
            logger.info("Cache DELETED", key=key, existed=removed)

    async def sweep(self) -> SweepResult:
        """Physically remove every expired entry.

        Returns:
            SweepResult with the number of rows removed.
        """
        with log_context(cache_name=self.store.name, operation="sweep"):
            await self._ensure_schema()
            now = self._clock()
            async with self._lock:
                removed = await self.store.delete_where_expired(now)
            logger.debug("Expiration sweep", expired=removed, swept_at=now)
            return SweepResult(removed=removed, swept_at=now)

    async def _sweep_loop(self) -> None:
        """Sweep on a fixed interval until cancelled.

        A failed iteration is logged and skipped; the next tick retries.
        """
        while True:
            await asyncio.sleep(self.expiration_interval)
            try:
                await self.sweep()
            except Exception as e:
                logger.warning("Expiration sweep failed", error=str(e), exc_info=True)

    async def _ensure_schema(self) -> None:
        """Create the table on first use so an unstarted engine still works."""
        if self._schema_ready:
            return
        async with self._lock:
            if not self._schema_ready:
                await self.store.ensure_schema()
                self._schema_ready = True

    def _resolve_ttl(self, ttl_seconds: int | None, now: int) -> int:
        if ttl_seconds is None:
            return self.default_ttl
        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int):
            raise ConfigurationError(
                "TTL must be an integer number of seconds",
                context={"ttl_seconds": ttl_seconds},
            )
        if ttl_seconds <= 0:
            return self.default_ttl
        if now + ttl_seconds > MAX_EXPIRES_AT:
            raise ConfigurationError(
                "TTL puts expiration beyond the storable range",
                context={"ttl_seconds": ttl_seconds, "max_expires_at": MAX_EXPIRES_AT},
            )
        return ttl_seconds


class DisabledCache(CacheProtocol):
    """Cache that stores nothing.

    get() always returns None and put()/delete() do nothing. No storage is
    opened, which keeps persisted state untouched during development and tests.
    """

    @property
    def policy(self) -> ExpirationPolicy:
        return ExpirationPolicy.DISABLED

    async def get(self, key: str) -> Any | None:
        return None

    async def put(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None
