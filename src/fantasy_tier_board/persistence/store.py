from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING, Protocol

from fantasy_tier_board.db.pool import ConnectionPool
from fantasy_tier_board.domain.errors import StorageError
from fantasy_tier_board.domain.result import Err, Ok, Result

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Flat string-keyed durable storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> Result[None, StorageError]: ...

    def delete(self, key: str) -> None: ...


class SqliteKeyValueStore:
    def __init__(self, db_path: Path, pool: ConnectionPool | None = None) -> None:
        self._db_path = db_path
        self._pool = pool or ConnectionPool(db_path)

    def get(self, key: str) -> str | None:
        with self._pool.connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            return row["value"] if row is not None else None

    def set(self, key: str, value: str) -> Result[None, StorageError]:
        try:
            with self._pool.connection() as conn:
                conn.execute(
                    "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, datetime('now'))"
                    " ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                    (key, value),
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.debug("Write of %s to %s failed: %s", key, self._db_path, e)
            return Err(StorageError(message=str(e), key=key))
        return Ok(None)

    def delete(self, key: str) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
