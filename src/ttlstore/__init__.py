"""Persistent key-value cache with time-based expiration, backed by SQLite."""

from ttlstore.cache import (
    CacheEngine,
    CacheProtocol,
    DisabledCache,
    SQLiteStore,
    open_cache,
)
from ttlstore.exceptions import (
    CacheError,
    ConfigurationError,
    CorruptEntry,
    SerializationError,
    StorageUnavailable,
)
from ttlstore.types import CacheEntry, ExpirationPolicy, SweepResult

__version__ = "0.1.0"

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheError",
    "CacheProtocol",
    "ConfigurationError",
    "CorruptEntry",
    "DisabledCache",
    "ExpirationPolicy",
    "SQLiteStore",
    "SerializationError",
    "StorageUnavailable",
    "SweepResult",
    "open_cache",
]
