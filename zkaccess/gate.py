"""
zkaccess Access Gate

The enforcement point that decides whether a caller may invoke a guarded
action. Each call walks a small state machine:

    RECEIVED
      -> WHITELIST_CHECK
           -> ALLOWED                      whitelist admits the address
           -> PROOF_CHECK                  a request was supplied
                -> DENIED                  engine returned False or raised
                -> NULLIFIER_CHECK
                     -> DENIED_REPLAY      nullifier already recorded
                     -> RECORD_NULLIFIER -> ALLOWED
           -> DENIED                       no request supplied

Calls are independent: the only shared state is the whitelist storage
and the nullifier registry. The nullifier is checked and recorded in a
single registry call.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

from .errors import AccessDeniedError
from .logging_config import AuditLogger, audit_log, get_request_id, request_id_var
from .nullifier import NullifierDeriver
from .receipts import Receipt, ReceiptSigner
from .registry import NullifierRegistry, RegistryOutcome
from .types import AccessRequest, Address
from .verification import ProofVerificationEngine
from .whitelist import WhitelistGate

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    """States of a single authorization attempt."""
    RECEIVED = "RECEIVED"
    WHITELIST_CHECK = "WHITELIST_CHECK"
    PROOF_CHECK = "PROOF_CHECK"
    NULLIFIER_CHECK = "NULLIFIER_CHECK"
    RECORD_NULLIFIER = "RECORD_NULLIFIER"
    ALLOWED = "ALLOWED"  # terminal
    DENIED = "DENIED"  # terminal
    DENIED_REPLAY = "DENIED_REPLAY"  # terminal


TERMINAL_STATES = frozenset({GateState.ALLOWED, GateState.DENIED, GateState.DENIED_REPLAY})


class AuthorizationPath(str, Enum):
    """How an allowed caller got through."""
    WHITELIST = "WHITELIST"
    PROOF = "PROOF"


class DenialReason(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"  # not whitelisted, no request
    ADDRESS_MISMATCH = "ADDRESS_MISMATCH"  # request.user is not the caller
    VERIFICATION_FAILED = "VERIFICATION_FAILED"
    REPLAY_DETECTED = "REPLAY_DETECTED"


@dataclass
class AccessDecision:
    """Outcome of one authorization attempt."""
    state: GateState
    address: Address
    reason: Optional[DenialReason] = None
    path: Optional[AuthorizationPath] = None
    nullifier: Optional[bytes] = None
    details: Optional[str] = None
    trail: List[GateState] = field(default_factory=list)
    request_id: str = ""
    receipt: Optional[Receipt] = None

    def allowed(self) -> bool:
        return self.state == GateState.ALLOWED

    def to_dict(self) -> Dict[str, Any]:
        """Decision payload; this is what a receipt signs."""
        d: Dict[str, Any] = {
            "state": self.state.value,
            "address": self.address.hex(),
            "trail": [s.value for s in self.trail],
        }
        if self.reason:
            d["reason"] = self.reason.value
        if self.path:
            d["path"] = self.path.value
        if self.nullifier is not None:
            d["nullifier"] = self.nullifier.hex()
        if self.details:
            d["details"] = self.details
        if self.request_id:
            d["request_id"] = self.request_id
        return d


class AccessGate:
    """
    Composes the whitelist, nullifier derivation, a proof verification
    engine and a nullifier registry into one authorization decision.

    Usage:
        gate = AccessGate(whitelist, engine, registry, verifying_key=vk)

        decision = gate.authorize(caller, request)
        if decision.allowed():
            serve(caller)

        # Or as a decorator
        @gate.protect()
        def read_record(caller, request=None):
            ...
    """

    def __init__(
        self,
        whitelist: WhitelistGate,
        engine: ProofVerificationEngine,
        registry: NullifierRegistry,
        verifying_key: Any = None,
        deriver: Optional[NullifierDeriver] = None,
        signer: Optional[ReceiptSigner] = None,
        audit: Optional[AuditLogger] = None
    ):
        self.whitelist = whitelist
        self.engine = engine
        self.registry = registry
        self.verifying_key = verifying_key
        self.deriver = deriver or NullifierDeriver()
        self.signer = signer
        self.audit = audit or audit_log

    def authorize(self, address: Address, request: Optional[AccessRequest] = None) -> AccessDecision:
        """
        Decide whether ``address`` may proceed.

        Authorization failures come back as a denied decision. Storage or
        registry failures propagate as ``StorageUnavailableError``.

        The context's request id is reused; without one, a fresh id is
        bound for the duration of the call so audit records and the
        decision share it.
        """
        request_id = get_request_id()
        token = None
        if not request_id:
            request_id = str(uuid.uuid4())
            token = request_id_var.set(request_id)
        try:
            return self._decide(address, request, request_id)
        finally:
            if token is not None:
                request_id_var.reset(token)

    def _decide(self, address: Address, request: Optional[AccessRequest], request_id: str) -> AccessDecision:
        trail = [GateState.RECEIVED]
        self.audit.authorization_request(
            address=str(address),
            has_proof=request is not None,
            resource_id=request.resource_id.hex() if request is not None else None
        )

        trail.append(GateState.WHITELIST_CHECK)
        if self.whitelist.authorize(address):
            return self._finish(AccessDecision(
                state=GateState.ALLOWED,
                address=address,
                path=AuthorizationPath.WHITELIST,
                trail=trail,
                request_id=request_id
            ))

        if request is None:
            return self._finish(AccessDecision(
                state=GateState.DENIED,
                address=address,
                reason=DenialReason.UNAUTHORIZED,
                details="Address not whitelisted and no proof supplied",
                trail=trail,
                request_id=request_id
            ))

        if request.user != address:
            self.audit.security_event(
                "address_mismatch",
                severity="medium",
                address=str(address),
                request_user=str(request.user)
            )
            return self._finish(AccessDecision(
                state=GateState.DENIED,
                address=address,
                reason=DenialReason.ADDRESS_MISMATCH,
                details=f"Request was built for {request.user}",
                trail=trail,
                request_id=request_id
            ))

        trail.append(GateState.PROOF_CHECK)
        if not self._verify(request):
            return self._finish(AccessDecision(
                state=GateState.DENIED,
                address=address,
                reason=DenialReason.VERIFICATION_FAILED,
                details="Proof rejected by verification engine",
                trail=trail,
                request_id=request_id
            ))

        trail.append(GateState.NULLIFIER_CHECK)
        nullifier = self.deriver.for_request(request)
        outcome = self.registry.check_and_record(nullifier)

        if outcome == RegistryOutcome.ALREADY_USED:
            self.audit.security_event(
                "proof_replay",
                severity="high",
                address=str(address),
                nullifier=nullifier.hex()
            )
            return self._finish(AccessDecision(
                state=GateState.DENIED_REPLAY,
                address=address,
                reason=DenialReason.REPLAY_DETECTED,
                nullifier=nullifier,
                details="Nullifier already recorded",
                trail=trail,
                request_id=request_id
            ))

        trail.append(GateState.RECORD_NULLIFIER)
        return self._finish(AccessDecision(
            state=GateState.ALLOWED,
            address=address,
            path=AuthorizationPath.PROOF,
            nullifier=nullifier,
            trail=trail,
            request_id=request_id
        ))

    def protect(self):
        """
        Decorator guarding a function whose first two arguments are the
        caller address and an optional ``AccessRequest``.

        Raises:
            AccessDeniedError: the gate denied the call
        """
        def decorator(func: Callable):
            @wraps(func)
            def wrapper(address: Address, request: Optional[AccessRequest] = None, *args, **kwargs):
                decision = self.authorize(address, request)
                if not decision.allowed():
                    raise AccessDeniedError(decision)
                return func(address, request, *args, **kwargs)
            return wrapper
        return decorator

    def _verify(self, request: AccessRequest) -> bool:
        """Run the engine, failing closed on anything but a literal True."""
        try:
            result = self.engine.verify(request.proof, request.public_inputs, self.verifying_key)
        except Exception:
            logger.exception("Proof verification engine raised; treating as rejection")
            return False
        return result is True

    def _finish(self, decision: AccessDecision) -> AccessDecision:
        decision.trail.append(decision.state)
        if self.signer is not None:
            decision.receipt = self.signer.sign(decision.to_dict())
        self.audit.authorization_decision(
            address=str(decision.address),
            state=decision.state.value,
            reason=decision.reason.value if decision.reason else None,
            path=decision.path.value if decision.path else None,
            nullifier=decision.nullifier.hex() if decision.nullifier is not None else None,
            trail=[s.value for s in decision.trail]
        )
        return decision
