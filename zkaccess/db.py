"""
Database module for zkaccess.

SQLite-backed persistence shared by ``SQLiteStorage`` and
``SQLiteNullifierRegistry``. Every write runs inside ``transaction()``,
which commits on success, rolls back on failure and surfaces driver
errors as ``StorageUnavailableError``.
"""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from .errors import StorageUnavailableError

MEMORY = ":memory:"


class Database:
    """
    A single SQLite connection guarded by a re-entrant lock.

    The lock serializes transactions from threads sharing this object;
    cross-process atomicity comes from SQLite itself.
    """

    def __init__(self, path: Union[str, Path] = MEMORY):
        self.path = str(path)
        self._lock = threading.RLock()
        try:
            if self.path != MEMORY:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.path, check_same_thread=False, isolation_level=None)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.row_factory = sqlite3.Row
        except (sqlite3.Error, OSError) as e:
            raise StorageUnavailableError(f"Cannot open database {self.path}: {e}") from e
        self._conn = conn
        self.init_schema()

    def init_schema(self) -> None:
        """Create tables. Safe to call multiple times."""
        with self.transaction() as conn:
            conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                scope TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                PRIMARY KEY (scope, key)
            );""")
            conn.execute("""
            CREATE TABLE IF NOT EXISTS nullifiers (
                nullifier TEXT PRIMARY KEY,
                recorded_at INTEGER DEFAULT (strftime('%s', 'now'))
            );""")

    @contextmanager
    def transaction(self, immediate: bool = True) -> Iterator[sqlite3.Connection]:
        """
        Run a block in a transaction.

        Writers use ``BEGIN IMMEDIATE``, taking the write lock up front so a
        read inside the block cannot be invalidated by a concurrent writer.
        Pure reads pass ``immediate=False`` and never wait on writers.
        """
        with self._lock:
            conn = self._conn
            try:
                conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN DEFERRED")
            except sqlite3.Error as e:
                raise StorageUnavailableError(f"Cannot begin transaction: {e}") from e
            try:
                yield conn
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                conn.execute("ROLLBACK")
                raise StorageUnavailableError(f"Database error: {e}") from e
            except BaseException:
                conn.execute("ROLLBACK")
                raise

    def close(self) -> None:
        with self._lock:
            self._conn.close()
