#!/usr/bin/env python3
"""
zkaccess Example - Whitelist and Proof Authorization

Walks a guarded "download report" action through the gate:
a whitelisted operator, a member proving eligibility with a proof,
the same proof replayed, and a receipt checked by a third party.

Run with: python examples/gate_example.py
"""

import hashlib
from typing import Sequence

from zkaccess import (
    AccessDeniedError,
    AccessGate,
    AccessRequestBuilder,
    Address,
    Database,
    Proof,
    ProofVerificationEngine,
    ReceiptSigner,
    SQLiteNullifierRegistry,
    SQLiteStorage,
    WhitelistGate,
    verify_receipt,
)


class SimulatedGroth16Engine(ProofVerificationEngine):
    """
    Stand-in for a pairing-based verifier.

    In production this would run the Groth16 pairing check against the
    circuit's verifying key. Here a proof is "valid" when its C point is
    the SHA-256 of A || B, so the example can forge and break proofs.
    """

    def verify(self, proof: Proof, public_inputs: Sequence[bytes], verifying_key) -> bool:
        expected = hashlib.sha256(proof.a.to_bytes() + proof.b.to_bytes()).digest()
        return proof.c.x == expected


def make_proof_buffers(seed: bytes):
    a = hashlib.sha512(b"A" + seed).digest()
    b = hashlib.sha512(b"B0" + seed).digest() + hashlib.sha512(b"B1" + seed).digest()
    c = hashlib.sha256(a + b).digest() + bytes(32)
    return a, b, c


def main():
    print("=" * 70)
    print("zkaccess Authorization - Example")
    print("=" * 70)

    # ================================================================
    # SETUP
    # ================================================================
    print("\n[SETUP] Initializing gate components...")

    database = Database()
    whitelist = WhitelistGate(
        instance=SQLiteStorage(database, scope="instance"),
        persistent=SQLiteStorage(database, scope="persistent"),
    )
    whitelist.set_enabled(True)

    operator = Address.from_text("ops@example.org")
    member = Address.from_text("member-4711")
    whitelist.add(operator)

    signer = ReceiptSigner(key_id="kid:example-receipts")
    gate = AccessGate(
        whitelist=whitelist,
        engine=SimulatedGroth16Engine(),
        registry=SQLiteNullifierRegistry(database),
        verifying_key={"circuit": "membership-v1"},
        signer=signer,
    )
    resource_id = hashlib.sha256(b"reports/2024-q4.pdf").digest()
    print(f"  Whitelist enforcement: {'on' if whitelist.is_enabled() else 'off'}")
    print(f"  Operator whitelisted: {operator}")

    @gate.protect()
    def download_report(address, request=None):
        return f"reports/2024-q4.pdf -> {address}"

    # ================================================================
    # SCENARIO 1: Whitelisted operator
    # ================================================================
    print("\n" + "-" * 70)
    print("SCENARIO 1: Whitelisted operator, no proof")
    print("-" * 70)

    decision = gate.authorize(operator)
    print(f"  Decision: {decision.state.value} via {decision.path.value}")
    print(f"  Result: {download_report(operator)}")

    # ================================================================
    # SCENARIO 2: Member with a valid proof
    # ================================================================
    print("\n" + "-" * 70)
    print("SCENARIO 2: Member proves eligibility")
    print("-" * 70)

    proof_a, proof_b, proof_c = make_proof_buffers(b"member-4711")
    request = AccessRequestBuilder().create(
        member, resource_id, proof_a, proof_b, proof_c,
        public_inputs=[hashlib.sha256(b"membership-root").digest()],
    )
    decision = gate.authorize(member, request)
    print(f"  Decision: {decision.state.value} via {decision.path.value}")
    print(f"  Nullifier: {decision.nullifier.hex()[:32]}...")
    print(f"  Trail: {' -> '.join(s.value for s in decision.trail)}")

    # ================================================================
    # SCENARIO 3: Replay
    # ================================================================
    print("\n" + "-" * 70)
    print("SCENARIO 3: Same proof submitted again (BLOCKED)")
    print("-" * 70)

    try:
        download_report(member, request)
    except AccessDeniedError as e:
        print(f"  ✗ {e}")
        print(f"  State: {e.decision.state.value}")

    # ================================================================
    # SCENARIO 4: Third-party receipt check
    # ================================================================
    print("\n" + "-" * 70)
    print("SCENARIO 4: Auditor verifies the signed decision")
    print("-" * 70)

    payload = decision.to_dict()
    ok = verify_receipt(payload, decision.receipt, signer.verify_key)
    print(f"  Receipt key: {decision.receipt.key_id}")
    print(f"  Signature valid: {ok}")

    payload["address"] = str(operator)
    print(f"  Signature valid after tampering: {verify_receipt(payload, decision.receipt, signer.verify_key)}")

    database.close()
    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
