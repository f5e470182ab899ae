"""Signed decision receipts and canonical encoding."""

import unittest

from nacl.signing import SigningKey

from zkaccess import Receipt, ReceiptSigner, verify_receipt
from zkaccess.canonicalization import canonicalize_str


class TestCanonicalization(unittest.TestCase):

    def test_key_ordering(self):
        self.assertEqual(
            canonicalize_str({"z": {"b": 1, "a": 2}, "a": [3, 1]}),
            '{"a":[3,1],"z":{"a":2,"b":1}}'
        )

    def test_bytes_and_tuples(self):
        self.assertEqual(canonicalize_str(("marker", b"\x0a\xff")), '["marker","0aff"]')

    def test_unsupported_type(self):
        with self.assertRaises(ValueError):
            canonicalize_str({"x": object()})


class TestReceipts(unittest.TestCase):

    def setUp(self):
        self.signer = ReceiptSigner(key_id="kid:test")
        self.payload = {"state": "ALLOWED", "address": "01" * 32, "path": "PROOF"}

    def test_sign_and_verify(self):
        receipt = self.signer.sign(self.payload)
        self.assertEqual(receipt.key_id, "kid:test")
        self.assertEqual(receipt.algorithm, "Ed25519")
        self.assertTrue(verify_receipt(self.payload, receipt, self.signer.verify_key))

    def test_key_order_irrelevant(self):
        receipt = self.signer.sign(self.payload)
        reordered = dict(reversed(list(self.payload.items())))
        self.assertTrue(verify_receipt(reordered, receipt, self.signer.verify_key))

    def test_tampered_payload(self):
        receipt = self.signer.sign(self.payload)
        tampered = dict(self.payload, state="DENIED")
        self.assertFalse(verify_receipt(tampered, receipt, self.signer.verify_key))

    def test_wrong_key(self):
        receipt = self.signer.sign(self.payload)
        other = bytes(SigningKey.generate().verify_key)
        self.assertFalse(verify_receipt(self.payload, receipt, other))

    def test_garbage_signature(self):
        receipt = Receipt(key_id="kid:test", sig="not base64!!")
        self.assertFalse(verify_receipt(self.payload, receipt, self.signer.verify_key))

    def test_unknown_algorithm(self):
        receipt = self.signer.sign(self.payload)
        receipt.algorithm = "RSA"
        self.assertFalse(verify_receipt(self.payload, receipt, self.signer.verify_key))

    def test_deterministic_seed(self):
        seed = b"\x07" * 32
        a = ReceiptSigner(seed).sign(self.payload)
        b = ReceiptSigner(seed).sign(self.payload)
        self.assertEqual(a.sig, b.sig)

    def test_dict_round_trip(self):
        receipt = self.signer.sign(self.payload)
        self.assertEqual(Receipt.from_dict(receipt.to_dict()), receipt)


if __name__ == "__main__":
    unittest.main()
