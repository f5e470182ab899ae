"""Shared fixtures for the zkaccess test suite."""

from typing import Any, List, Sequence, Tuple

from zkaccess import (
    AccessGate,
    AccessRequest,
    Address,
    FixedClock,
    InMemoryNullifierRegistry,
    InMemoryStorage,
    Proof,
    ProofVerificationEngine,
    WhitelistGate,
)
from zkaccess.builder import AccessRequestBuilder


ADDR1 = Address(b"\x01" * 32)
ADDR2 = Address(b"\x02" * 32)
RESOURCE = b"\x22" * 32
VERIFYING_KEY = {"circuit": "membership-v1"}


def proof_buffers(seed: int = 0) -> Tuple[bytes, bytes, bytes]:
    """Distinct, recognisable proof buffers (A, B, C) for a seed."""
    a = bytes((seed + i) % 256 for i in range(64))
    b = bytes((seed + 64 + i) % 256 for i in range(128))
    c = bytes((seed + 192 + i) % 256 for i in range(64))
    return a, b, c


def make_request(
    user: Address = ADDR1,
    resource_id: bytes = RESOURCE,
    seed: int = 0,
    public_inputs: Sequence[bytes] = (b"\x05" * 32,),
    timestamp: int = 1_700_000_000,
) -> AccessRequest:
    a, b, c = proof_buffers(seed)
    builder = AccessRequestBuilder(FixedClock(timestamp))
    return builder.create(user, resource_id, a, b, c, public_inputs)


class StaticEngine(ProofVerificationEngine):
    """Engine returning a fixed verdict and recording its calls."""

    def __init__(self, result: Any = True):
        self.result = result
        self.calls: List[Tuple[Proof, Sequence[bytes], Any]] = []

    def verify(self, proof, public_inputs, verifying_key):
        self.calls.append((proof, public_inputs, verifying_key))
        return self.result


class RaisingEngine(ProofVerificationEngine):
    """Engine that fails internally."""

    def verify(self, proof, public_inputs, verifying_key):
        raise RuntimeError("pairing check crashed")


def make_gate(engine=None, enabled: bool = True, **kwargs) -> AccessGate:
    whitelist = WhitelistGate(InMemoryStorage())
    whitelist.set_enabled(enabled)
    registry = kwargs.pop("registry", None)
    return AccessGate(
        whitelist=whitelist,
        engine=engine if engine is not None else StaticEngine(True),
        registry=registry if registry is not None else InMemoryNullifierRegistry(),
        verifying_key=VERIFYING_KEY,
        **kwargs
    )
