"""
zkaccess Hashing

32-byte digest primitives used for nullifier derivation, plus the
prefixed hex format used when digests are printed or logged.
"""

import hashlib
from typing import Dict, Protocol

from Crypto.Hash import keccak


DIGEST_SIZE = 32


class Hasher(Protocol):
    """Cryptographic hash with a 32-byte output."""

    name: str

    def digest32(self, data: bytes) -> bytes:
        ...


class Sha3Hasher:
    """SHA3-256 (FIPS 202). Default nullifier hash."""

    name = "sha3-256"

    def digest32(self, data: bytes) -> bytes:
        return hashlib.sha3_256(data).digest()


class Sha256Hasher:
    """SHA-256 (FIPS 180-4)."""

    name = "sha256"

    def digest32(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class Keccak256Hasher:
    """
    Original Keccak-256 (pre-FIPS padding), as used by EVM and Soroban
    contracts. Needed to reproduce on-chain nullifiers off-chain.
    """

    name = "keccak-256"

    def digest32(self, data: bytes) -> bytes:
        return keccak.new(data=data, digest_bits=256).digest()


HASHERS: Dict[str, type] = {
    Sha3Hasher.name: Sha3Hasher,
    Sha256Hasher.name: Sha256Hasher,
    Keccak256Hasher.name: Keccak256Hasher,
}


def get_hasher(name: str) -> Hasher:
    """Factory for a named hasher."""
    if name not in HASHERS:
        raise ValueError(f"Unknown hash algorithm: {name}")
    return HASHERS[name]()


def format_digest(digest: bytes, algorithm: str = Sha3Hasher.name) -> str:
    """
    Render a digest in prefixed lowercase hex.

    Returns:
        Hash string in format "sha3-256:abcdef..."
    """
    return f"{algorithm}:{digest.hex()}"
