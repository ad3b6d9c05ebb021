"""
Tests for structured logging.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ttlstore.logging import (
    JSONFormatter,
    get_cache_name,
    get_logger,
    get_operation,
    log_context,
    set_log_level,
    setup_logging,
)


def make_record(msg: str = "Cache HIT", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("ttlstore.test", logging.INFO, __file__, 1, msg, None, None)
    if extra:
        record.extra = extra
    return record


class TestLogContext:
    """Test scoped context variables."""

    def test_context_set_and_restored(self) -> None:
        """Test values apply inside the block and are reset after."""
        assert get_cache_name() is None

        with log_context(cache_name="cache", operation="get"):
            assert get_cache_name() == "cache"
            assert get_operation() == "get"

            with log_context(operation="sweep"):
                assert get_cache_name() == "cache"
                assert get_operation() == "sweep"

            assert get_operation() == "get"

        assert get_cache_name() is None
        assert get_operation() is None


class TestJSONFormatter:
    """Test the JSON Lines formatter."""

    def test_includes_context_and_extra(self) -> None:
        """Test context variables and extra fields land in the JSON."""
        with log_context(cache_name="cache", operation="put"):
            line = JSONFormatter().format(make_record(key="a"))

        data = json.loads(line)
        assert data["message"] == "Cache HIT"
        assert data["level"] == "INFO"
        assert data["cache_name"] == "cache"
        assert data["operation"] == "put"
        assert data["extra"] == {"key": "a"}

    def test_without_context(self) -> None:
        """Test context keys are omitted when unset."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert "cache_name" not in data
        assert "extra" not in data


class TestSetupLogging:
    """Test handler setup."""

    def test_file_logging(self, temp_dir: Path) -> None:
        """Test keyword fields reach the JSON log file."""
        log_file = temp_dir / "logs" / "cache.jsonl"
        setup_logging(log_level="DEBUG", log_file=log_file, console_output=False)
        try:
            assert logging.getLogger("ttlstore").propagate is False
            logger = get_logger("engine")
            assert logger.name == "ttlstore.engine"

            with log_context(operation="delete"):
                logger.info("Cache DELETED", key="gone")

            for handler in logging.getLogger("ttlstore").handlers:
                handler.flush()

            data = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
            assert data["message"] == "Cache DELETED"
            assert data["operation"] == "delete"
            assert data["extra"]["key"] == "gone"
        finally:
            for handler in logging.getLogger("ttlstore").handlers:
                handler.close()


class TestLibraryDefaults:
    """Test the logger state the library leaves for the host."""

    def test_import_leaves_logging_to_host(self) -> None:
        """Test importing ttlstore installs no console handler."""
        import ttlstore  # noqa: F401

        ttl_logger = logging.getLogger("ttlstore")
        assert ttl_logger.propagate is True
        assert all(isinstance(h, logging.NullHandler) for h in ttl_logger.handlers)

    def test_records_reach_host_handlers(self, caplog) -> None:
        """Test cache records propagate to the root logger."""
        logger = get_logger("engine")

        with caplog.at_level(logging.INFO, logger="ttlstore"):
            logger.info("Cache MISS", key="absent")

        assert [r.getMessage() for r in caplog.records] == ["Cache MISS"]
        assert caplog.records[0].extra["key"] == "absent"

    def test_set_log_level(self) -> None:
        """Test the level changes without adding handlers."""
        handlers = list(logging.getLogger("ttlstore").handlers)

        set_log_level("warning")

        assert logging.getLogger("ttlstore").level == logging.WARNING
        assert logging.getLogger("ttlstore").handlers == handlers
