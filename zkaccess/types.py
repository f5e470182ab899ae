"""
zkaccess Core Types

Fixed-size byte layouts for Groth16-style proofs and the canonical
access request submitted to the gate. Curve points are opaque to this
package: only their byte layout is validated, never group membership.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple, Union

from .errors import MalformedInputError


COORDINATE_SIZE = 32
G1_SIZE = 2 * COORDINATE_SIZE
G2_SIZE = 4 * COORDINATE_SIZE
PROOF_SIZE = G1_SIZE + G2_SIZE + G1_SIZE
RESOURCE_ID_SIZE = 32
MAX_U64 = 2**64 - 1
MAX_NONCE = MAX_U64

BytesLike = Union[bytes, bytearray, memoryview]


def require_length(name: str, value: Any, size: int) -> bytes:
    """Return ``value`` as bytes, rejecting anything that is not exactly ``size`` bytes."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise MalformedInputError(name, f"{size} bytes", type(value).__name__)
    value = bytes(value)
    if len(value) != size:
        raise MalformedInputError(name, f"{size} bytes", f"{len(value)} bytes")
    return value


def decode_hex(name: str, text: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix."""
    if text.startswith(("0x", "0X")):
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise MalformedInputError(name, "hex string", repr(text[:16]))


@dataclass(frozen=True)
class Address:
    """
    Opaque caller identity.

    Equality and hashing follow the raw bytes, so an Address can be used
    as a mapping key. ``to_bytes()`` is the representation bound into
    the nullifier.
    """
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)):
            raise MalformedInputError("address", "bytes", type(self.raw).__name__)
        if len(self.raw) == 0:
            raise MalformedInputError("address", "non-empty bytes", "0 bytes")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        return cls(decode_hex("address", text))

    @classmethod
    def from_text(cls, text: str) -> "Address":
        """Address from a textual account id (UTF-8 encoded)."""
        return cls(text.encode("utf-8"))

    def to_bytes(self) -> bytes:
        return self.raw

    def hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return f"0x{self.raw.hex()}"


@dataclass(frozen=True)
class G1Point:
    """Point on G1: two 32-byte coordinates."""
    x: bytes
    y: bytes

    def __post_init__(self):
        object.__setattr__(self, "x", require_length("G1.x", self.x, COORDINATE_SIZE))
        object.__setattr__(self, "y", require_length("G1.y", self.y, COORDINATE_SIZE))

    @classmethod
    def from_bytes(cls, data: BytesLike, name: str = "G1") -> "G1Point":
        data = require_length(name, data, G1_SIZE)
        return cls(x=data[0:32], y=data[32:64])

    def to_bytes(self) -> bytes:
        return self.x + self.y


@dataclass(frozen=True)
class G2Point:
    """
    Point on G2 over the quadratic extension field.

    Coordinates are pairs ``(x0, x1)`` and ``(y0, y1)``; the serialized
    order is x0, x1, y0, y1.
    """
    x: Tuple[bytes, bytes]
    y: Tuple[bytes, bytes]

    def __post_init__(self):
        object.__setattr__(self, "x", _pair("G2.x", self.x))
        object.__setattr__(self, "y", _pair("G2.y", self.y))

    @classmethod
    def from_bytes(cls, data: BytesLike, name: str = "G2") -> "G2Point":
        data = require_length(name, data, G2_SIZE)
        return cls(x=(data[0:32], data[32:64]), y=(data[64:96], data[96:128]))

    def to_bytes(self) -> bytes:
        return self.x[0] + self.x[1] + self.y[0] + self.y[1]


def _pair(name: str, value: Any) -> Tuple[bytes, bytes]:
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise MalformedInputError(name, "pair of coordinates", repr(type(value).__name__))
    return (
        require_length(f"{name}0", value[0], COORDINATE_SIZE),
        require_length(f"{name}1", value[1], COORDINATE_SIZE),
    )


@dataclass(frozen=True)
class Proof:
    """Groth16 proof ``(A, B, C)``; 256 bytes when serialized."""
    a: G1Point
    b: G2Point
    c: G1Point

    def coordinates(self) -> Tuple[bytes, ...]:
        """The eight coordinates in canonical order."""
        return (
            self.a.x, self.a.y,
            self.b.x[0], self.b.x[1], self.b.y[0], self.b.y[1],
            self.c.x, self.c.y,
        )

    def to_bytes(self) -> bytes:
        return b"".join(self.coordinates())

    @classmethod
    def from_bytes(cls, data: BytesLike) -> "Proof":
        data = require_length("proof", data, PROOF_SIZE)
        return cls(
            a=G1Point.from_bytes(data[0:64], "proof_a"),
            b=G2Point.from_bytes(data[64:192], "proof_b"),
            c=G1Point.from_bytes(data[192:256], "proof_c"),
        )


def normalize_public_inputs(public_inputs: Iterable[BytesLike]) -> Tuple[bytes, ...]:
    """Validate public inputs, preserving their order."""
    return tuple(
        require_length(f"public_inputs[{i}]", pi, COORDINATE_SIZE)
        for i, pi in enumerate(public_inputs)
    )


def _require_u64(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedInputError(name, "integer", type(value).__name__)
    if value < 0 or value > MAX_U64:
        raise MalformedInputError(name, f"0 <= {name} <= {MAX_U64}", str(value))
    return value


def require_nonce(nonce: Any) -> int:
    return _require_u64("nonce", nonce)


def require_timestamp(timestamp: Any) -> int:
    """Unix seconds; callers round-tripping JSON may supply it."""
    return _require_u64("timestamp", timestamp)


@dataclass(frozen=True)
class AccessRequest:
    """
    Canonical bundle submitted for an authorization decision.

    Built once per call (see ``AccessRequestBuilder``) and consumed once.
    """
    user: Address
    resource_id: bytes
    proof: Proof
    public_inputs: Tuple[bytes, ...] = field(default_factory=tuple)
    nonce: int = 0
    timestamp: int = 0

    def __post_init__(self):
        if not isinstance(self.user, Address):
            raise MalformedInputError("user", "Address", type(self.user).__name__)
        object.__setattr__(
            self, "resource_id",
            require_length("resource_id", self.resource_id, RESOURCE_ID_SIZE),
        )
        object.__setattr__(self, "public_inputs", normalize_public_inputs(self.public_inputs))
        require_nonce(self.nonce)
        require_timestamp(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Hex-encoded dictionary form, used for JSON interchange and logging."""
        return {
            "user": self.user.hex(),
            "resource_id": self.resource_id.hex(),
            "proof": {
                "a": {"x": self.proof.a.x.hex(), "y": self.proof.a.y.hex()},
                "b": {
                    "x": [self.proof.b.x[0].hex(), self.proof.b.x[1].hex()],
                    "y": [self.proof.b.y[0].hex(), self.proof.b.y[1].hex()],
                },
                "c": {"x": self.proof.c.x.hex(), "y": self.proof.c.y.hex()},
            },
            "public_inputs": [pi.hex() for pi in self.public_inputs],
            "nonce": self.nonce,
            "timestamp": self.timestamp,
        }
