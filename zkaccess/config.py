"""
Configuration module for zkaccess.

Environment variables are read once at import; ``load_settings()``
re-reads them into a ``Settings`` object for hosts that configure the
process after import (tests, CLI flags).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .hashing import HASHERS

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("ZKACCESS_ENV", "dev")  # dev|stage|prod

DB_PATH = os.getenv("ZKACCESS_DB_PATH", "data/zkaccess.db")
HASH_ALGORITHM = os.getenv("ZKACCESS_HASH", "sha3-256")

LOG_LEVEL = os.getenv("ZKACCESS_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("ZKACCESS_LOG_JSON", "true")

VALID_ENVS = ("dev", "stage", "prod")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    db_path: Path = Path("data/zkaccess.db")
    hash_algorithm: str = "sha3-256"
    log_level: str = "INFO"
    log_json: bool = True

    def __post_init__(self):
        if self.env not in VALID_ENVS:
            raise ValueError(f"ZKACCESS_ENV must be one of {VALID_ENVS}, got {self.env!r}")
        if self.hash_algorithm not in HASHERS:
            raise ValueError(
                f"ZKACCESS_HASH must be one of {sorted(HASHERS)}, got {self.hash_algorithm!r}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"ZKACCESS_LOG_LEVEL must be one of {LOG_LEVELS}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from ``environ`` (defaults to ``os.environ``)."""
    environ = os.environ if environ is None else environ
    return Settings(
        env=environ.get("ZKACCESS_ENV", ENV),
        db_path=Path(environ.get("ZKACCESS_DB_PATH", DB_PATH)),
        hash_algorithm=environ.get("ZKACCESS_HASH", HASH_ALGORITHM),
        log_level=environ.get("ZKACCESS_LOG_LEVEL", LOG_LEVEL).upper(),
        log_json=_parse_bool(environ.get("ZKACCESS_LOG_JSON", LOG_JSON)),
    )
