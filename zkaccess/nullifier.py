"""
zkaccess Nullifier Derivation

A nullifier is a one-time-use token bound to a proof and the context it
is presented in. The hashed buffer is, in this exact order:

    a.x | a.y | b.x0 | b.x1 | b.y0 | b.y1 | c.x | c.y
    | public_inputs[0] | ... | public_inputs[n-1]
    | user bytes | resource_id

Ordering is part of the contract. Public inputs must be supplied in the
order the verifying circuit defines them; a different order produces a
different nullifier for the same proof.

The hash defaults to ``ZKACCESS_HASH`` so the gate and the CLI derive
the same token. The request nonce and timestamp are not bound: replay uniqueness rests on
proof contents plus (user, resource_id).
"""

from typing import Iterable, Optional

from .config import load_settings
from .hashing import Hasher, get_hasher
from .types import (
    RESOURCE_ID_SIZE,
    AccessRequest,
    Address,
    BytesLike,
    Proof,
    normalize_public_inputs,
    require_length,
)


def default_hasher() -> Hasher:
    """The hasher named by ``ZKACCESS_HASH`` (SHA3-256 when unset)."""
    return get_hasher(load_settings().hash_algorithm)


def nullifier_preimage(
    proof: Proof,
    public_inputs: Iterable[BytesLike],
    user: Address,
    resource_id: BytesLike,
) -> bytes:
    """Concatenate the nullifier inputs in canonical order."""
    buf = bytearray()
    for coordinate in proof.coordinates():
        buf.extend(coordinate)
    for pi in normalize_public_inputs(public_inputs):
        buf.extend(pi)
    buf.extend(user.to_bytes())
    buf.extend(require_length("resource_id", resource_id, RESOURCE_ID_SIZE))
    return bytes(buf)


def compute_nullifier(
    proof: Proof,
    public_inputs: Iterable[BytesLike],
    user: Address,
    resource_id: BytesLike,
    hasher: Optional[Hasher] = None,
) -> bytes:
    """
    Compute the 32-byte nullifier for a proof presented in context.

    Pure: identical arguments always give the identical digest.
    """
    hasher = hasher or default_hasher()
    return hasher.digest32(nullifier_preimage(proof, public_inputs, user, resource_id))


class NullifierDeriver:
    """Binds a hash primitive for repeated nullifier derivation."""

    def __init__(self, hasher: Optional[Hasher] = None):
        self.hasher = hasher or default_hasher()

    def compute(
        self,
        proof: Proof,
        public_inputs: Iterable[BytesLike],
        user: Address,
        resource_id: BytesLike,
    ) -> bytes:
        return compute_nullifier(proof, public_inputs, user, resource_id, self.hasher)

    def for_request(self, request: AccessRequest) -> bytes:
        return self.compute(request.proof, request.public_inputs, request.user, request.resource_id)
