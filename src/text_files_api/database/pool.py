"""
Bounded pool of sqlite3 connections with scoped acquisition.

A connection checked out through `ConnectionPool.connection()` is committed when
the block exits normally, rolled back when it raises, and returned to the pool
on every exit path.
"""

import logging
import queue
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)

SQLITE_URL_PREFIX = "sqlite:///"


def database_path_from_url(database_url: str) -> str:
    """
    Resolve a database URL to a sqlite file path.

    `sqlite:///tags.db` is relative to the working directory, `sqlite:////var/db/tags.db`
    is absolute, and a bare path is used as-is.
    """
    if database_url.startswith(SQLITE_URL_PREFIX):
        path = database_url[len(SQLITE_URL_PREFIX):]
    elif "://" in database_url:
        raise ValueError(f"Unsupported database URL: {database_url}")
    else:
        path = database_url
    if not path or path == ":memory:":
        # every pooled connection would get its own private in-memory database
        raise ValueError(f"database_url must name a database file, got: {database_url!r}")
    return path


class ConnectionPool:
    """Thread-safe pool of at most `max_size` open connections to one sqlite database."""

    def __init__(self, db_path: str, max_size: int = 5, timeout: float = 30.0):
        self.db_path = db_path
        self.max_size = max_size
        self.timeout = timeout
        self._idle: "queue.LifoQueue[sqlite3.Connection]" = queue.LifoQueue()
        self._lock = threading.Lock()
        self._opened = 0
        self._closed = False

    @property
    def opened(self) -> int:
        """Number of connections currently open, idle or checked out."""
        return self._opened

    def _open(self) -> sqlite3.Connection:
        # connections move between the server's worker threads
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _acquire(self) -> sqlite3.Connection:
        if self._closed:
            raise sqlite3.ProgrammingError("Connection pool is closed")
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass

        with self._lock:
            can_open = self._opened < self.max_size
            if can_open:
                self._opened += 1
        if can_open:
            try:
                return self._open()
            except sqlite3.Error:
                with self._lock:
                    self._opened -= 1
                raise

        try:
            return self._idle.get(timeout=self.timeout)
        except queue.Empty:
            raise sqlite3.OperationalError(
                f"Timed out after {self.timeout}s waiting for a connection to {self.db_path}"
            ) from None

    def _release(self, conn: sqlite3.Connection) -> None:
        if self._closed:
            conn.close()
            with self._lock:
                self._opened -= 1
            return
        self._idle.put(conn)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Check out a connection for the duration of a `with` block."""
        conn = self._acquire()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    def close(self) -> None:
        """Close idle connections; checked-out ones are closed when released."""
        self._closed = True
        while True:
            try:
                conn = self._idle.get_nowait()
            except queue.Empty:
                break
            conn.close()
            with self._lock:
                self._opened -= 1
        logger.info(f"Connection pool for {self.db_path} closed")
