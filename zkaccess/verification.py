"""
zkaccess Proof Verification Interface

Pairing checks and verifying-key evaluation live outside this package.
The gate only consumes the boolean outcome, and treats an engine that
raises as one that returned ``False``.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from .types import Proof


class ProofVerificationEngine(ABC):
    """Verifies a proof against public inputs and a verifying key."""

    @abstractmethod
    def verify(self, proof: Proof, public_inputs: Sequence[bytes], verifying_key: Any) -> bool:
        """
        Return True only for a proof accepted under ``verifying_key``.

        The verifying key is opaque to this package and passed through
        unchanged from the gate's configuration.
        """
        pass
