"""
zkaccess Error Types

Authorization failures are reported as decisions, not raised.
The exceptions below cover malformed input, storage failure and the
decorator path that turns a denial into an exception.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .gate import AccessDecision


class ZkAccessError(Exception):
    """Base class for all zkaccess errors."""


class MalformedInputError(ZkAccessError, ValueError):
    """A buffer, coordinate or field does not have the required shape."""

    def __init__(self, field: str, expected: str, observed: str):
        self.field = field
        self.expected = expected
        self.observed = observed
        super().__init__(f"Malformed {field}: expected {expected}, got {observed}")


class StorageUnavailableError(ZkAccessError):
    """The backing store could not complete a read or write."""


class AccessDeniedError(ZkAccessError):
    """Raised when a protected call is denied by the access gate."""

    def __init__(self, decision: "AccessDecision"):
        self.decision = decision
        reason = decision.reason.value if decision.reason else "unknown"
        super().__init__(f"Access denied: {reason}")
