"""
Custom exception hierarchy for the cache.

All exceptions inherit from CacheError, which provides optional context
for structured error handling and logging. A missing key is never an error.
"""

from __future__ import annotations

from typing import Any


class CacheError(Exception):
    """Base exception for all cache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(CacheError):
    """Raised when cache options are invalid.

    Examples:
        - Non-integer TTL passed to put()
        - Non-positive expiration interval
    """

    pass


class StorageUnavailable(CacheError):
    """Raised when the durable store cannot be opened or queried.

    Not retried internally; the caller owns the retry policy.

    Context should include:
        - db_path: The database file
        - operation: The store operation that failed
    """

    pass


class SerializationError(CacheError):
    """Raised when a value passed to put() cannot be encoded.

    Nothing is written when this is raised.

    Context should include:
        - key: The cache key
        - value_type: Type name of the rejected value
    """

    pass


class CorruptEntry(CacheError):
    """Raised when a stored value fails to decode on get().

    Context should include:
        - key: The cache key
    """

    pass
