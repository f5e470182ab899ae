"""
zkaccess Access Request Builder

Formats raw proof buffers and public inputs into an ``AccessRequest``.

Intended for tests and off-chain tooling so requests submitted to the
gate are laid out consistently. The builder checks buffer lengths only;
it does not check that points are on the curve or in the right subgroup.
"""

from typing import Iterable, Optional

from .clock import Clock, SystemClock
from .types import (
    G1_SIZE,
    G2_SIZE,
    RESOURCE_ID_SIZE,
    AccessRequest,
    Address,
    BytesLike,
    G1Point,
    G2Point,
    Proof,
    normalize_public_inputs,
    require_length,
    require_nonce,
)


class AccessRequestBuilder:
    """
    Builds access requests stamped from an injected clock.

    The timestamp is never accepted from the caller.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def create(
        self,
        user: Address,
        resource_id: BytesLike,
        proof_a: BytesLike,
        proof_b: BytesLike,
        proof_c: BytesLike,
        public_inputs: Iterable[BytesLike] = (),
        *,
        nonce: int = 0,
    ) -> AccessRequest:
        """
        Split fixed-length buffers into coordinates and assemble a request.

        Args:
            user: Caller identity
            resource_id: 32-byte resource reference
            proof_a: 64 bytes, x || y
            proof_b: 128 bytes, x0 || x1 || y0 || y1
            proof_c: 64 bytes, x || y
            public_inputs: 32-byte values in circuit order
            nonce: Caller-chosen value; it is not part of the nullifier

        Raises:
            MalformedInputError: any buffer has the wrong length
        """
        proof = Proof(
            a=G1Point.from_bytes(require_length("proof_a", proof_a, G1_SIZE), "proof_a"),
            b=G2Point.from_bytes(require_length("proof_b", proof_b, G2_SIZE), "proof_b"),
            c=G1Point.from_bytes(require_length("proof_c", proof_c, G1_SIZE), "proof_c"),
        )
        return AccessRequest(
            user=user,
            resource_id=require_length("resource_id", resource_id, RESOURCE_ID_SIZE),
            proof=proof,
            public_inputs=normalize_public_inputs(public_inputs),
            nonce=require_nonce(nonce),
            timestamp=self.clock.now(),
        )


def create_request(
    user: Address,
    resource_id: BytesLike,
    proof_a: BytesLike,
    proof_b: BytesLike,
    proof_c: BytesLike,
    public_inputs: Iterable[BytesLike] = (),
    nonce: int = 0,
) -> AccessRequest:
    """Create a request stamped with the system clock."""
    return AccessRequestBuilder().create(
        user, resource_id, proof_a, proof_b, proof_c, public_inputs, nonce=nonce
    )
