import logging
import queue
import sqlite3
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from fantasy_tier_board.db.connection import create_connection

logger = logging.getLogger(__name__)


class ConnectionPool:
    """Bounded set of SQLite connections to one board database.

    Connections are opened on first demand, up to *size*; once all of them are
    checked out, ``get`` waits for one to be released.
    """

    def __init__(self, path: str | Path, *, size: int = 2) -> None:
        self._path = path
        self._size = size
        self._closed = False
        self._opened: list[sqlite3.Connection] = []
        self._idle: queue.Queue[sqlite3.Connection] = queue.Queue(maxsize=size)
        self._open_lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def _try_open(self) -> sqlite3.Connection | None:
        with self._open_lock:
            if len(self._opened) >= self._size:
                return None
            conn = create_connection(self._path, check_same_thread=False)
            self._opened.append(conn)
            logger.debug("Opened connection %d/%d to %s", len(self._opened), self._size, self._path)
            return conn

    def get(self, *, timeout: float | None = None) -> sqlite3.Connection:
        """Check out a connection.

        Raises RuntimeError if the pool is closed and TimeoutError if every
        connection stays checked out for *timeout* seconds.
        """
        if self._closed:
            raise RuntimeError("Connection pool is closed")
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass
        conn = self._try_open()
        if conn is not None:
            return conn
        try:
            return self._idle.get(timeout=timeout)
        except queue.Empty:
            logger.warning("All %d connections to %s are in use", self._size, self._path)
            raise TimeoutError("No connection available in pool") from None

    def release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            return
        self._idle.put(conn)

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection]:
        """Check out a connection for the duration of the block; uncommitted work is rolled back."""
        conn = self.get()
        try:
            yield conn
        finally:
            conn.rollback()
            self.release(conn)

    def close_all(self) -> None:
        self._closed = True
        with self._open_lock:
            logger.debug("Closing %d connections to %s", len(self._opened), self._path)
            for conn in self._opened:
                conn.close()
            self._opened.clear()
        while True:
            try:
                self._idle.get_nowait()
            except queue.Empty:
                break
