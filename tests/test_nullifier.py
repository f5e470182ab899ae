"""
Nullifier Derivation Test Suite

Fixed vectors pin the byte layout:
    a.x | a.y | b.x0 | b.x1 | b.y0 | b.y1 | c.x | c.y | inputs... | user | resource_id
"""

import hashlib
import os
import unittest
from unittest import mock

from zkaccess import (
    Address,
    Keccak256Hasher,
    MalformedInputError,
    NullifierDeriver,
    Proof,
    Sha256Hasher,
    compute_nullifier,
    get_hasher,
    nullifier_preimage,
)

from tests.helpers import make_request, proof_buffers


ZERO_PROOF = Proof.from_bytes(b"\x00" * 256)
USER_U = Address(b"\x11" * 32)
RESOURCE_R = b"\x22" * 32
RESOURCE_R_PRIME = b"\x23" + b"\x22" * 31

# SHA3-256(zeros(256) | 0x11 * 32 | 0x22 * 32)
DIGEST_D = bytes.fromhex("fbe2cca84f40ba6d9641d722146574193b3cda2fde08d91038164c7b23a59e14")
# SHA3-256(zeros(256) | 0x11 * 32 | 0x23 | 0x22 * 31)
DIGEST_D_PRIME = bytes.fromhex("e7aec92d25512d38e7e46aa6bc7e787d516ef66e86a494d833123361f49ad581")
# SHA-256 of the same preimage as DIGEST_D
DIGEST_D_SHA256 = bytes.fromhex("df89907cc03409f4be1b7f138f0a3a578d6b26d500d0242f42c9268fb3ebf34f")
# Keccak-256 of the preimages of DIGEST_D and DIGEST_D_PRIME
DIGEST_D_KECCAK = bytes.fromhex("8e6274b42f6c0c6a14e8c8ba9b11029112f5bc6e1618a910721375c1b5a997ea")
DIGEST_D_PRIME_KECCAK = bytes.fromhex("6798daa4d41c3dc192cd708af813b03a5b9f3239e7afc4e182b35eff45eb23eb")


def flip(data: bytes, index: int) -> bytes:
    buf = bytearray(data)
    buf[index] ^= 0x01
    return bytes(buf)


class TestFixedVectors(unittest.TestCase):
    """Scenario 3: all-zero proof, no public inputs."""

    def test_zero_proof_vector(self):
        d = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R)
        self.assertEqual(d, DIGEST_D)

    def test_repeat_call_identical(self):
        d1 = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R)
        d2 = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R)
        self.assertEqual(d1, d2)

    def test_changed_resource_vector(self):
        d_prime = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R_PRIME)
        self.assertEqual(d_prime, DIGEST_D_PRIME)
        self.assertNotEqual(d_prime, DIGEST_D)

    def test_sha256_hasher_vector(self):
        d = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R, hasher=Sha256Hasher())
        self.assertEqual(d, DIGEST_D_SHA256)

    def test_digest_is_32_bytes(self):
        self.assertEqual(len(compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R)), 32)


class TestKeccakVectors(unittest.TestCase):
    """Same preimages under the contract hash."""

    def setUp(self):
        self.hasher = get_hasher("keccak-256")

    def test_zero_proof_vector(self):
        d = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R, hasher=self.hasher)
        self.assertEqual(d, DIGEST_D_KECCAK)

    def test_changed_resource_vector(self):
        d_prime = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R_PRIME, hasher=self.hasher)
        self.assertEqual(d_prime, DIGEST_D_PRIME_KECCAK)

    def test_differs_from_sha3(self):
        self.assertIsInstance(self.hasher, Keccak256Hasher)
        self.assertNotEqual(DIGEST_D_KECCAK, DIGEST_D)


class TestDefaultHasher(unittest.TestCase):

    def test_sha3_when_unset(self):
        self.assertEqual(NullifierDeriver().hasher.name, "sha3-256")

    def test_follows_environment(self):
        with mock.patch.dict(os.environ, {"ZKACCESS_HASH": "sha256"}):
            deriver = NullifierDeriver()
            d = compute_nullifier(ZERO_PROOF, [], USER_U, RESOURCE_R)
        self.assertEqual(deriver.hasher.name, "sha256")
        self.assertEqual(d, DIGEST_D_SHA256)

    def test_explicit_hasher_wins(self):
        with mock.patch.dict(os.environ, {"ZKACCESS_HASH": "sha256"}):
            deriver = NullifierDeriver(Keccak256Hasher())
        self.assertEqual(deriver.compute(ZERO_PROOF, [], USER_U, RESOURCE_R), DIGEST_D_KECCAK)


class TestPreimageLayout(unittest.TestCase):

    def test_canonical_order(self):
        a, b, c = proof_buffers(7)
        proof = Proof.from_bytes(a + b + c)
        inputs = [b"\xaa" * 32, b"\xbb" * 32]

        preimage = nullifier_preimage(proof, inputs, USER_U, RESOURCE_R)

        self.assertEqual(preimage, a + b + c + inputs[0] + inputs[1] + USER_U.to_bytes() + RESOURCE_R)

    def test_matches_hashlib(self):
        request = make_request()
        preimage = nullifier_preimage(request.proof, request.public_inputs, request.user, request.resource_id)
        expected = hashlib.sha3_256(preimage).digest()
        self.assertEqual(NullifierDeriver().for_request(request), expected)

    def test_public_input_order_matters(self):
        x, y = b"\x01" * 32, b"\x02" * 32
        self.assertNotEqual(
            compute_nullifier(ZERO_PROOF, [x, y], USER_U, RESOURCE_R),
            compute_nullifier(ZERO_PROOF, [y, x], USER_U, RESOURCE_R),
        )

    def test_nonce_and_timestamp_not_bound(self):
        r1 = make_request(timestamp=1)
        r2 = make_request(timestamp=2)
        deriver = NullifierDeriver()
        self.assertEqual(deriver.for_request(r1), deriver.for_request(r2))


class TestSingleByteFlips(unittest.TestCase):
    """Flipping one byte of any bound field changes the nullifier."""

    def setUp(self):
        a, b, c = proof_buffers(3)
        self.raw = a + b + c
        self.inputs = [b"\x10" * 32, b"\x20" * 32]
        self.base = compute_nullifier(Proof.from_bytes(self.raw), self.inputs, USER_U, RESOURCE_R)

    def _with_proof_flip(self, index: int) -> bytes:
        return compute_nullifier(Proof.from_bytes(flip(self.raw, index)), self.inputs, USER_U, RESOURCE_R)

    def test_flip_proof_a_x(self):
        self.assertNotEqual(self._with_proof_flip(0), self.base)

    def test_flip_proof_a_y(self):
        self.assertNotEqual(self._with_proof_flip(63), self.base)

    def test_flip_each_g2_coordinate(self):
        for index in (64, 96, 128, 191):
            with self.subTest(index=index):
                self.assertNotEqual(self._with_proof_flip(index), self.base)

    def test_flip_proof_c(self):
        self.assertNotEqual(self._with_proof_flip(200), self.base)
        self.assertNotEqual(self._with_proof_flip(255), self.base)

    def test_flip_public_input(self):
        inputs = [self.inputs[0], flip(self.inputs[1], 31)]
        flipped = compute_nullifier(Proof.from_bytes(self.raw), inputs, USER_U, RESOURCE_R)
        self.assertNotEqual(flipped, self.base)

    def test_flip_user(self):
        user = Address(flip(USER_U.to_bytes(), 5))
        flipped = compute_nullifier(Proof.from_bytes(self.raw), self.inputs, user, RESOURCE_R)
        self.assertNotEqual(flipped, self.base)

    def test_flip_resource(self):
        flipped = compute_nullifier(Proof.from_bytes(self.raw), self.inputs, USER_U, flip(RESOURCE_R, 16))
        self.assertNotEqual(flipped, self.base)


class TestMalformedInputs(unittest.TestCase):

    def test_short_resource_rejected(self):
        with self.assertRaises(MalformedInputError):
            compute_nullifier(ZERO_PROOF, [], USER_U, b"\x22" * 31)

    def test_long_public_input_rejected(self):
        with self.assertRaises(MalformedInputError):
            compute_nullifier(ZERO_PROOF, [b"\x00" * 33], USER_U, RESOURCE_R)


if __name__ == "__main__":
    unittest.main()
