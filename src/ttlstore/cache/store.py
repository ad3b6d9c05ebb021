"""
Durable table backing the cache.

SQLiteStore keeps one table, `cache (key TEXT UNIQUE, value TEXT,
expiration INTEGER)`, in a SQLite file accessed through aiosqlite. Every
operation opens its own connection and releases it on every exit path;
writes commit before the connection closes.
"""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from ttlstore.exceptions import StorageUnavailable
from ttlstore.logging import get_logger

logger = get_logger(__name__)

TABLE_NAME = "cache"


class SQLiteStore:
    """SQLite-backed key -> (serialized value, expiration) table.

    The store owns its table exclusively. Keys are unique; upsert replaces
    a row in a single statement so readers never see a missing or half
    written row.
    """

    def __init__(self, db_path: str | Path) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)

    @property
    def name(self) -> str:
        """Short name used in log context."""
        return self.db_path.stem

    @asynccontextmanager
    async def _connect(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection for one operation.

        Raises:
            StorageUnavailable: If the database cannot be opened or queried.
        """
        try:
            async with aiosqlite.connect(self.db_path) as db:
                yield db
        except (sqlite3.Error, OSError) as e:
            raise StorageUnavailable(
                "Cache storage unavailable",
                context={"db_path": str(self.db_path), "operation": operation, "error": str(e)},
            ) from e

    async def ensure_schema(self) -> None:
        """Create the cache table if absent. Safe to call multiple times."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailable(
                "Cannot create cache directory",
                context={"db_path": str(self.db_path), "operation": "ensure_schema"},
            ) from e

        async with self._connect("ensure_schema") as db:
            await db.execute(
                f"CREATE TABLE IF NOT EXISTS {TABLE_NAME} "
                "(key TEXT UNIQUE, value TEXT, expiration INTEGER)"
            )
            await db.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{TABLE_NAME}_expiration "
                f"ON {TABLE_NAME}(expiration)"
            )
            await db.commit()

    async def get(self, key: str) -> tuple[str, int] | None:
        """Look up a row by key.

        Returns:
            (serialized_value, expires_at) or None if absent.
        """
        async with self._connect("get") as db:
            async with db.execute(
                f"SELECT value, expiration FROM {TABLE_NAME} WHERE key = ?", (key,)
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return None
        return row[0], row[1]

    async def upsert(self, key: str, serialized_value: str, expires_at: int) -> None:
        """Insert or fully replace the row for key."""
        async with self._connect("upsert") as db:
            await db.execute(
                f"""
                INSERT INTO {TABLE_NAME} (key, value, expiration) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    expiration = excluded.expiration
                """,
                (key, serialized_value, expires_at),
            )
            await db.commit()

    async def delete(self, key: str) -> bool:
        """Remove the row for key if present.

        Returns:
            True if a row was removed.
        """
        async with self._connect("delete") as db:
            cursor = await db.execute(f"DELETE FROM {TABLE_NAME} WHERE key = ?", (key,))
            removed = cursor.rowcount
            await cursor.close()
            await db.commit()
        return removed > 0

    async def delete_where_expired(self, now: int) -> int:
        """Remove every row whose expiration is at or before now.

        Returns:
            Number of rows removed.
        """
        async with self._connect("delete_where_expired") as db:
            cursor = await db.execute(
                f"DELETE FROM {TABLE_NAME} WHERE expiration <= ?", (now,)
            )
            removed = cursor.rowcount
            await cursor.close()
            await db.commit()
        return max(removed, 0)

    async def count(self) -> int:
        """Get total count of physical rows, expired or not."""
        async with self._connect("count") as db:
            async with db.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}") as cursor:
                row = await cursor.fetchone()
        return row[0] if row else 0
