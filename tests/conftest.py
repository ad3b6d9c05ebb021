"""
Pytest configuration and fixtures for cache tests.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import AsyncGenerator, Generator
from unittest.mock import patch

import pytest

from ttlstore.cache.engine import CacheEngine
from ttlstore.cache.store import SQLiteStore
from ttlstore.config import Settings, clear_settings_cache

START_TIME = 1_700_000_000


class FakeClock:
    """Manually advanced clock returning whole seconds."""

    def __init__(self, now: int = START_TIME) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class CountingStore(SQLiteStore):
    """SQLiteStore that records every call made to it."""

    def __init__(self, db_path: str | Path) -> None:
        super().__init__(db_path)
        self.calls: list[str] = []

    async def ensure_schema(self) -> None:
        self.calls.append("ensure_schema")
        await super().ensure_schema()

    async def get(self, key: str) -> tuple[str, int] | None:
        self.calls.append("get")
        return await super().get(key)

    async def upsert(self, key: str, serialized_value: str, expires_at: int) -> None:
        self.calls.append("upsert")
        await super().upsert(key, serialized_value, expires_at)

    async def delete(self, key: str) -> bool:
        self.calls.append("delete")
        return await super().delete(key)

    async def delete_where_expired(self, now: int) -> int:
        self.calls.append("delete_where_expired")
        return await super().delete_where_expired(now)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test databases."""
    return tmp_path


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """Path for a fresh cache database."""
    return temp_dir / "cache" / "cache.db"


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed timestamp."""
    return FakeClock()


@pytest.fixture
async def store(db_path: Path) -> CountingStore:
    """Create a store with its schema in place."""
    store = CountingStore(db_path)
    await store.ensure_schema()
    store.calls.clear()
    return store


@pytest.fixture
async def lazy_cache(store: CountingStore, clock: FakeClock) -> AsyncGenerator[CacheEngine, None]:
    """Engine that sweeps before every get."""
    engine = CacheEngine(store, expire_on_get=True, clock=clock)
    await engine.start()
    yield engine
    await engine.close()


@pytest.fixture
async def background_cache(
    store: CountingStore, clock: FakeClock
) -> AsyncGenerator[CacheEngine, None]:
    """Engine with a fast background sweeper."""
    engine = CacheEngine(store, expire_on_get=False, expiration_interval=0.05, clock=clock)
    await engine.start()
    yield engine
    await engine.close()


@pytest.fixture
def mock_env_vars(db_path: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "CACHE_DB_PATH": str(db_path),
        "CACHE_DISABLE": "false",
        "CACHE_EXPIRATION_INTERVAL": "45",
        "CACHE_EXPIRE_ON_GET": "true",
        "CACHE_DEFAULT_TTL": "120",
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def make_settings(db_path: Path):
    """Factory for Settings that ignore any .env file."""

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {"CACHE_DB_PATH": db_path}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def restore_ttlstore_logger() -> Generator[None, None, None]:
    """Undo level and handler changes made to the ttlstore logger."""
    ttl_logger = logging.getLogger("ttlstore")
    handlers = list(ttl_logger.handlers)
    level = ttl_logger.level
    propagate = ttl_logger.propagate
    yield
    for handler in ttl_logger.handlers:
        if handler not in handlers:
            handler.close()
    ttl_logger.handlers[:] = handlers
    ttl_logger.setLevel(level)
    ttl_logger.propagate = propagate
