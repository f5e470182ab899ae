"""
zkaccess Whitelist Gate

Allow-list of addresses exempt from proof checks, plus a global
enforcement flag.

Policy:
    authorize(address) = not enabled OR address in whitelist

Disabling enforcement admits everyone without clearing the list, so
re-enabling restores the previous membership. Membership is presence of
a ``True`` marker; ``False`` is never written.
"""

import logging
from typing import Optional

from .logging_config import AuditLogger, audit_log
from .storage import StorageContext
from .types import Address

logger = logging.getLogger(__name__)

ENABLED_KEY = "whitelist-enabled"
MARKER_PREFIX = "whitelist-marker"


def marker_key(address: Address):
    return (MARKER_PREFIX, address.hex())


class WhitelistGate:
    """
    Whitelist over injectable storage.

    Args:
        instance: Scope holding the global flag
        persistent: Scope holding membership markers (defaults to ``instance``)
        audit: Audit logger for administrative changes

    Callers are responsible for restricting ``set_enabled``, ``add`` and
    ``remove`` to administrators.
    """

    def __init__(
        self,
        instance: StorageContext,
        persistent: Optional[StorageContext] = None,
        audit: Optional[AuditLogger] = None
    ):
        self.instance = instance
        self.persistent = persistent if persistent is not None else instance
        self.audit = audit or audit_log

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable enforcement globally."""
        enabled = bool(enabled)
        self.instance.set(ENABLED_KEY, enabled)
        self.audit.whitelist_change("enable" if enabled else "disable")

    def is_enabled(self) -> bool:
        """Whether enforcement is on; ``False`` when never set."""
        return bool(self.instance.get(ENABLED_KEY, False))

    def add(self, address: Address) -> None:
        self.persistent.set(marker_key(address), True)
        self.audit.whitelist_change("add", str(address))

    def remove(self, address: Address) -> None:
        self.persistent.remove(marker_key(address))
        self.audit.whitelist_change("remove", str(address))

    def contains(self, address: Address) -> bool:
        return self.persistent.get(marker_key(address), False) is True

    def authorize(self, address: Address) -> bool:
        """Whether ``address`` may call guarded functions without a proof."""
        if not self.is_enabled():
            logger.debug("Whitelist enforcement disabled; admitting %s", address)
            return True
        return self.contains(address)
