"""
JSON interchange models for access requests.

Hex-encoded mirrors of the core dataclasses, used by the CLI and other
off-chain tooling that reads or writes request files.
"""

from typing import List, Tuple

from pydantic import BaseModel, Field, field_validator

from .types import AccessRequest, Address, G1Point, G2Point, Proof, decode_hex


def _strip_hex(value: str) -> str:
    value = value.strip()
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return value.lower()


class G1Model(BaseModel):
    x: str
    y: str

    @field_validator("x", "y")
    @classmethod
    def _hex(cls, v: str) -> str:
        return _strip_hex(v)

    def to_point(self) -> G1Point:
        return G1Point(x=decode_hex("G1.x", self.x), y=decode_hex("G1.y", self.y))


class G2Model(BaseModel):
    x: Tuple[str, str]
    y: Tuple[str, str]

    @field_validator("x", "y")
    @classmethod
    def _hex(cls, v: Tuple[str, str]) -> Tuple[str, str]:
        return (_strip_hex(v[0]), _strip_hex(v[1]))

    def to_point(self) -> G2Point:
        return G2Point(
            x=(decode_hex("G2.x0", self.x[0]), decode_hex("G2.x1", self.x[1])),
            y=(decode_hex("G2.y0", self.y[0]), decode_hex("G2.y1", self.y[1])),
        )


class ProofModel(BaseModel):
    a: G1Model
    b: G2Model
    c: G1Model

    def to_proof(self) -> Proof:
        return Proof(a=self.a.to_point(), b=self.b.to_point(), c=self.c.to_point())


class AccessRequestModel(BaseModel):
    user: str
    resource_id: str
    proof: ProofModel
    public_inputs: List[str] = Field(default_factory=list)
    nonce: int = Field(default=0, ge=0)
    timestamp: int = Field(default=0, ge=0)

    @field_validator("user", "resource_id")
    @classmethod
    def _hex(cls, v: str) -> str:
        return _strip_hex(v)

    @field_validator("public_inputs")
    @classmethod
    def _hex_list(cls, v: List[str]) -> List[str]:
        return [_strip_hex(item) for item in v]

    def to_request(self) -> AccessRequest:
        """Convert to the core dataclass, enforcing byte lengths."""
        return AccessRequest(
            user=Address.from_hex(self.user),
            resource_id=decode_hex("resource_id", self.resource_id),
            proof=self.proof.to_proof(),
            public_inputs=tuple(
                decode_hex(f"public_inputs[{i}]", pi) for i, pi in enumerate(self.public_inputs)
            ),
            nonce=self.nonce,
            timestamp=self.timestamp,
        )

    @classmethod
    def from_request(cls, request: AccessRequest) -> "AccessRequestModel":
        return cls.model_validate(request.to_dict())
