"""
zkaccess: Whitelist and Zero-Knowledge Access Gate

Version: 0.1.0

Decides whether a caller may invoke a guarded action:

    ALLOWED(address, request) =
        whitelist.authorize(address)
        OR (verify(request.proof) AND registry.check_and_record(nullifier(request)))

An unlisted caller proves eligibility with a Groth16 proof; a nullifier
derived from the proof and its context (user, resource) stops the same
proof from being accepted twice. Verification fails closed.

Usage:
    from zkaccess import (
        AccessGate,
        AccessRequestBuilder,
        Address,
        InMemoryNullifierRegistry,
        InMemoryStorage,
        WhitelistGate,
    )

    storage = InMemoryStorage()
    whitelist = WhitelistGate(storage)
    whitelist.set_enabled(True)

    gate = AccessGate(whitelist, engine, InMemoryNullifierRegistry(), verifying_key=vk)

    request = AccessRequestBuilder().create(
        user, resource_id, proof_a, proof_b, proof_c, public_inputs
    )
    decision = gate.authorize(user, request)

    if decision.allowed():
        ...
    else:
        print(decision.reason)
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

# Core types
from .types import (
    AccessRequest,
    Address,
    G1Point,
    G2Point,
    Proof,
    COORDINATE_SIZE,
    G1_SIZE,
    G2_SIZE,
    PROOF_SIZE,
    RESOURCE_ID_SIZE,
)

# Errors
from .errors import (
    ZkAccessError,
    MalformedInputError,
    StorageUnavailableError,
    AccessDeniedError,
)

# Hashing and nullifiers
from .hashing import Hasher, Sha3Hasher, Sha256Hasher, Keccak256Hasher, get_hasher, format_digest
from .nullifier import NullifierDeriver, compute_nullifier, nullifier_preimage

# Request construction
from .clock import Clock, SystemClock, FixedClock
from .builder import AccessRequestBuilder, create_request

# Storage and whitelist
from .storage import StorageContext, InMemoryStorage, SQLiteStorage
from .db import Database
from .whitelist import WhitelistGate

# Collaborators
from .verification import ProofVerificationEngine
from .registry import (
    NullifierRegistry,
    RegistryOutcome,
    InMemoryNullifierRegistry,
    SQLiteNullifierRegistry,
    RedisNullifierRegistry,
)

# Gate
from .gate import (
    AccessGate,
    AccessDecision,
    AuthorizationPath,
    DenialReason,
    GateState,
    TERMINAL_STATES,
)

# Receipts
from .receipts import Receipt, ReceiptSigner, verify_receipt


__all__ = [
    # Version
    "__version__",

    # Types
    "AccessRequest",
    "Address",
    "G1Point",
    "G2Point",
    "Proof",
    "COORDINATE_SIZE",
    "G1_SIZE",
    "G2_SIZE",
    "PROOF_SIZE",
    "RESOURCE_ID_SIZE",

    # Errors
    "ZkAccessError",
    "MalformedInputError",
    "StorageUnavailableError",
    "AccessDeniedError",

    # Hashing
    "Hasher",
    "Sha3Hasher",
    "Sha256Hasher",
    "Keccak256Hasher",
    "get_hasher",
    "format_digest",

    # Nullifiers
    "NullifierDeriver",
    "compute_nullifier",
    "nullifier_preimage",

    # Requests
    "Clock",
    "SystemClock",
    "FixedClock",
    "AccessRequestBuilder",
    "create_request",

    # Storage
    "StorageContext",
    "InMemoryStorage",
    "SQLiteStorage",
    "Database",
    "WhitelistGate",

    # Collaborators
    "ProofVerificationEngine",
    "NullifierRegistry",
    "RegistryOutcome",
    "InMemoryNullifierRegistry",
    "SQLiteNullifierRegistry",
    "RedisNullifierRegistry",

    # Gate
    "AccessGate",
    "AccessDecision",
    "AuthorizationPath",
    "DenialReason",
    "GateState",
    "TERMINAL_STATES",

    # Receipts
    "Receipt",
    "ReceiptSigner",
    "verify_receipt",
]
