"""
Structured logging for the cache.

Provides:
- Context variables for cache_name and operation (using contextvars)
- JSONFormatter for machine-readable logs to file
- RichHandler subclass for pretty console output
- ContextLogger wrapper that attaches context and keyword fields to log calls
- setup_logging() that configures both file and console handlers
- log_context() for scoped context
- get_logger() factory
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

ROOT_LOGGER = "ttlstore"

_cache_name_var: ContextVar[str | None] = ContextVar("cache_name", default=None)
_operation_var: ContextVar[str | None] = ContextVar("operation", default=None)


def get_cache_name() -> str | None:
    """Get the current cache name from context."""
    return _cache_name_var.get()


def get_operation() -> str | None:
    """Get the current cache operation from context."""
    return _operation_var.get()


@contextmanager
def log_context(
    cache_name: str | None = None,
    operation: str | None = None,
) -> Generator[None, None, None]:
    """Context manager for scoped logging context.

    Args:
        cache_name: Cache (database) name to set in context.
        operation: Operation name (get, put, delete, sweep) to set in context.

    Yields:
        None. Context variables are set for the duration of the context.
    """
    cache_token = _cache_name_var.set(cache_name) if cache_name is not None else None
    op_token = _operation_var.set(operation) if operation is not None else None
    try:
        yield
    finally:
        if op_token is not None:
            _operation_var.reset(op_token)
        if cache_token is not None:
            _cache_name_var.reset(cache_token)


def _context_fields() -> dict[str, str]:
    fields: dict[str, str] = {}
    cache_name = get_cache_name()
    operation = get_operation()
    if cache_name:
        fields["cache_name"] = cache_name
    if operation:
        fields["operation"] = operation
    return fields


class JSONFormatter(logging.Formatter):
    """JSON formatter for machine-readable log files.

    Produces JSON Lines format with structured context.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_obj.update(_context_fields())

        if hasattr(record, "extra"):
            log_obj["extra"] = record.extra

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class ContextRichHandler(RichHandler):
    """Rich handler that prefixes console lines with the cache context."""

    def get_level_text(self, record: logging.LogRecord) -> Text:
        """Override to add context prefix."""
        level_text = super().get_level_text(record)

        parts: list[str] = []
        cache_name = get_cache_name()
        operation = get_operation()
        if cache_name:
            parts.append(f"[dim]{cache_name}[/dim]")
        if operation:
            parts.append(f"[cyan]{operation}[/cyan]")

        if parts:
            return Text.from_markup(f"{level_text} {' '.join(parts)}")
        return level_text


class ContextLogger:
    """Logger wrapper that attaches context variables and keyword fields.

    Usage:
        logger.info("Cache HIT", key=key)
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        """Get the logger name."""
        return self._logger.name

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        exc_info: bool = False,
        **kwargs: Any,
    ) -> None:
        extra = kwargs.pop("extra", {})
        extra.update(_context_fields())

        for key in list(kwargs.keys()):
            if key not in ("stack_info", "stacklevel"):
                extra[key] = kwargs.pop(key)

        self._logger.log(level, msg, *args, exc_info=exc_info, extra={"extra": extra})

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, exc_info: bool = False, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)


_console: Console | None = None

# Records propagate to the host's handlers until setup_logging() is called
logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


def get_console() -> Console:
    """Get the global rich console."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def set_log_level(log_level: str) -> None:
    """Set the level of the ttlstore logger without touching handlers."""
    logging.getLogger(ROOT_LOGGER).setLevel(getattr(logging, log_level.upper()))


def setup_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
    console_output: bool = True,
) -> None:
    """Set up logging with JSON file handler and rich console handler.

    Optional; hosts with their own logging configuration should not call
    this. Once called, ttlstore records go to these handlers only.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, only console logging is enabled.
        console_output: Whether to enable console output.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    set_log_level(log_level)
    root_logger.handlers.clear()

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        file_handler.setLevel(logging.DEBUG)  # Log everything to file
        root_logger.addHandler(file_handler)

    if console_output:
        rich_handler = ContextRichHandler(
            console=get_console(),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=True,
        )
        rich_handler.setLevel(getattr(logging, log_level.upper()))
        root_logger.addHandler(rich_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    # Handlers above replace propagation to the host's root logger
    root_logger.propagate = False

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger.

    Does not configure handlers; see setup_logging().

    Args:
        name: Logger name (usually __name__).

    Returns:
        ContextLogger wrapper around the standard logger.
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return ContextLogger(logging.getLogger(name))
