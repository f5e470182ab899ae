"""
zkaccess Nullifier Registries

A registry records spent nullifiers. Its one hot-path operation,
``check_and_record``, must be atomic: two concurrent calls presenting
the same nullifier may not both observe it as unused.

Implementations:
- InMemoryNullifierRegistry: lock-guarded set (single process)
- SQLiteNullifierRegistry: ``INSERT OR IGNORE`` inside one transaction
- RedisNullifierRegistry: ``SET NX`` (distributed)
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Set

from .db import Database
from .errors import StorageUnavailableError
from .hashing import DIGEST_SIZE
from .types import require_length


class RegistryOutcome(str, Enum):
    """Result of an atomic check-and-record."""
    RECORDED = "RECORDED"
    ALREADY_USED = "ALREADY_USED"


class NullifierRegistry(ABC):
    """
    Abstract interface for tracking spent nullifiers.

    Implementations must be:
    - Atomic (check and record in one indivisible step)
    - Persistent where replay must be prevented across restarts
    """

    @abstractmethod
    def check_and_record(self, nullifier: bytes) -> RegistryOutcome:
        """
        Record ``nullifier`` if unseen.

        Returns:
            RECORDED on first use, ALREADY_USED otherwise
        """
        pass

    @abstractmethod
    def is_recorded(self, nullifier: bytes) -> bool:
        """Inspection only; never use as a precondition for recording."""
        pass


class InMemoryNullifierRegistry(NullifierRegistry):
    """
    In-memory registry for development/testing.

    WARNING: Not suitable for production.
    - Not persistent across restarts
    - Not shared between processes
    """

    def __init__(self):
        self._spent: Set[bytes] = set()
        self._lock = threading.Lock()

    def check_and_record(self, nullifier: bytes) -> RegistryOutcome:
        nullifier = require_length("nullifier", nullifier, DIGEST_SIZE)
        with self._lock:
            if nullifier in self._spent:
                return RegistryOutcome.ALREADY_USED
            self._spent.add(nullifier)
            return RegistryOutcome.RECORDED

    def is_recorded(self, nullifier: bytes) -> bool:
        with self._lock:
            return bytes(nullifier) in self._spent

    def __len__(self) -> int:
        with self._lock:
            return len(self._spent)


class SQLiteNullifierRegistry(NullifierRegistry):
    """
    SQLite-backed registry.

    The primary key on ``nullifier`` makes ``INSERT OR IGNORE`` the
    atomic check-and-set; ``rowcount`` tells the two outcomes apart.
    """

    def __init__(self, database: Database):
        self.database = database

    def check_and_record(self, nullifier: bytes) -> RegistryOutcome:
        nullifier = require_length("nullifier", nullifier, DIGEST_SIZE)
        with self.database.transaction() as conn:
            cur = conn.execute(
                "INSERT OR IGNORE INTO nullifiers(nullifier) VALUES(?)",
                (nullifier.hex(),)
            )
            inserted = cur.rowcount == 1
        return RegistryOutcome.RECORDED if inserted else RegistryOutcome.ALREADY_USED

    def is_recorded(self, nullifier: bytes) -> bool:
        with self.database.transaction(immediate=False) as conn:
            row = conn.execute(
                "SELECT 1 FROM nullifiers WHERE nullifier=?",
                (bytes(nullifier).hex(),)
            ).fetchone()
        return row is not None


class RedisNullifierRegistry(NullifierRegistry):
    """
    Redis-backed registry for distributed deployments.

    Uses ``SET key value NX`` as the atomic check-and-set. Nullifiers are
    kept forever unless ``ttl_seconds`` is given.

    Requires: a redis-py compatible client
    """

    def __init__(
        self,
        redis_client,
        key_prefix: str = "zkaccess:nullifier:",
        ttl_seconds: Optional[int] = None
    ):
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    def _key(self, nullifier: bytes) -> str:
        return f"{self.key_prefix}{bytes(nullifier).hex()}"

    def check_and_record(self, nullifier: bytes) -> RegistryOutcome:
        nullifier = require_length("nullifier", nullifier, DIGEST_SIZE)
        value = datetime.now(timezone.utc).isoformat()
        try:
            result = self.redis.set(self._key(nullifier), value, nx=True, ex=self.ttl_seconds)
        except Exception as e:
            raise StorageUnavailableError(f"Redis error: {e}") from e
        return RegistryOutcome.RECORDED if result else RegistryOutcome.ALREADY_USED

    def is_recorded(self, nullifier: bytes) -> bool:
        try:
            return self.redis.exists(self._key(nullifier)) > 0
        except Exception as e:
            raise StorageUnavailableError(f"Redis error: {e}") from e
