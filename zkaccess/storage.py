"""
zkaccess Storage Contexts

Injectable key/value stores backing the whitelist. A host supplies its
own store: an in-memory dict for tests, SQLite for durable deployments,
or an adapter over its own runtime storage.

Keys are strings or tuples of strings/bytes and are encoded with
canonical JSON, so ``("whitelist-marker", b"\\x01")`` always maps to the
same stored key. Values must be JSON-serializable.
"""

import json
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable

from .canonicalization import canonicalize_str
from .db import Database


def encode_key(key: Hashable) -> str:
    """Stable string form of a storage key."""
    return canonicalize_str(key)


class StorageContext(ABC):
    """
    Abstract key/value storage scope.

    Implementations must raise ``StorageUnavailableError`` on backend
    failure rather than returning a default.
    """

    @abstractmethod
    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when absent."""
        pass

    @abstractmethod
    def set(self, key: Hashable, value: Any) -> None:
        """Store ``value`` under ``key``, overwriting any previous value."""
        pass

    @abstractmethod
    def remove(self, key: Hashable) -> None:
        """Delete ``key``. Removing an absent key is a no-op."""
        pass

    def has(self, key: Hashable) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel


class InMemoryStorage(StorageContext):
    """
    Dict-backed storage for development and testing.

    Not persistent across restarts.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(encode_key(key), default)

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data[encode_key(key)] = value

    def remove(self, key: Hashable) -> None:
        with self._lock:
            self._data.pop(encode_key(key), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class SQLiteStorage(StorageContext):
    """
    SQLite-backed storage scope.

    Several scopes (e.g. ``instance`` and ``persistent``) can share one
    ``Database`` without key collisions.
    """

    def __init__(self, database: Database, scope: str = "persistent"):
        self.database = database
        self.scope = scope

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self.database.transaction(immediate=False) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE scope=? AND key=?",
                (self.scope, encode_key(key))
            ).fetchone()
        if row is None:
            return default
        return json.loads(row["value"])

    def set(self, key: Hashable, value: Any) -> None:
        with self.database.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store(scope, key, value) VALUES(?,?,?)",
                (self.scope, encode_key(key), json.dumps(value))
            )

    def remove(self, key: Hashable) -> None:
        with self.database.transaction() as conn:
            conn.execute(
                "DELETE FROM kv_store WHERE scope=? AND key=?",
                (self.scope, encode_key(key))
            )