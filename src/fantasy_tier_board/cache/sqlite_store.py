from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from fantasy_tier_board.db.pool import ConnectionPool

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

logger = logging.getLogger(__name__)


class SqliteCacheStore:
    """TTL cache in the ``cache`` table of the board database.

    Entries expire lazily: an expired row is removed the first time it is read.
    """

    def __init__(
        self,
        db_path: Path,
        clock: Callable[[], float] = time.time,
        pool: ConnectionPool | None = None,
    ) -> None:
        self._clock = clock
        self._pool = pool or ConnectionPool(db_path)

    def get(self, namespace: str, key: str) -> str | None:
        with self._pool.connection() as conn:
            row = conn.execute(
                "SELECT value, expires_at FROM cache WHERE namespace = ? AND key = ?",
                (namespace, key),
            ).fetchone()
        if row is None:
            return None
        if self._clock() >= row["expires_at"]:
            logger.debug("Cache entry %s/%s expired", namespace, key)
            self.invalidate(namespace, key)
            return None
        return row["value"]

    def put(self, namespace: str, key: str, value: str, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds
        with self._pool.connection() as conn:
            conn.execute(
                "INSERT INTO cache (namespace, key, value, expires_at) VALUES (?, ?, ?, ?)"
                " ON CONFLICT(namespace, key) DO UPDATE SET value=excluded.value, expires_at=excluded.expires_at",
                (namespace, key, value, expires_at),
            )
            conn.commit()

    def invalidate(self, namespace: str, key: str | None = None) -> None:
        sql = "DELETE FROM cache WHERE namespace = ?"
        params: tuple[str, ...] = (namespace,)
        if key is not None:
            sql += " AND key = ?"
            params = (namespace, key)
        with self._pool.connection() as conn:
            conn.execute(sql, params)
            conn.commit()

    def purge_expired(self) -> int:
        """Delete every expired entry; returns the number removed."""
        with self._pool.connection() as conn:
            cursor = conn.execute("DELETE FROM cache WHERE expires_at <= ?", (self._clock(),))
            conn.commit()
        if cursor.rowcount:
            logger.debug("Purged %d expired cache entries", cursor.rowcount)
        return cursor.rowcount
