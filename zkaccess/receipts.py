"""
zkaccess Decision Receipts

Ed25519 (RFC 8032) signatures over the canonical JSON of an access
decision, so a host can hand a caller tamper-evident proof of the
outcome.
"""

import base64
from dataclasses import dataclass
from typing import Any, Dict, Optional

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

from .canonicalization import canonicalize

ALGORITHM = "Ed25519"


@dataclass
class Receipt:
    """Detached signature over a decision payload."""
    key_id: str
    sig: str
    algorithm: str = ALGORITHM

    def to_dict(self) -> Dict[str, Any]:
        return {"key_id": self.key_id, "algorithm": self.algorithm, "sig": self.sig}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Receipt":
        return cls(
            key_id=data["key_id"],
            sig=data["sig"],
            algorithm=data.get("algorithm", ALGORITHM),
        )


class ReceiptSigner:
    """
    Signs decision payloads with an Ed25519 key.

    Args:
        signing_key: 32-byte seed; a fresh key is generated when omitted
        key_id: Identifier published alongside the verify key
    """

    def __init__(self, signing_key: Optional[bytes] = None, key_id: str = "kid:zkaccess-receipt-001"):
        self._signing_key = SigningKey(signing_key) if signing_key else SigningKey.generate()
        self.key_id = key_id

    @property
    def verify_key(self) -> bytes:
        return bytes(self._signing_key.verify_key)

    def sign(self, payload: Dict[str, Any]) -> Receipt:
        signed = self._signing_key.sign(canonicalize(payload))
        return Receipt(
            key_id=self.key_id,
            sig=base64.b64encode(signed.signature).decode('utf-8'),
        )


def verify_receipt(payload: Dict[str, Any], receipt: Receipt, verify_key: bytes) -> bool:
    """
    Check a receipt against the payload it claims to cover.

    Returns:
        True if the signature is valid, False otherwise
    """
    if receipt.algorithm != ALGORITHM:
        return False
    try:
        signature = base64.b64decode(receipt.sig, validate=True)
        VerifyKey(verify_key).verify(canonicalize(payload), signature)
        return True
    except (BadSignatureError, CryptoError, ValueError):
        return False
