"""
Ledger component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from .models import LedgerState


class SnapshotStorePort(Protocol):
    """Durable snapshot of the whole ledger."""

    def load(self) -> LedgerState | None:
        """Return the last saved state, or None when nothing was saved yet."""
        ...

    def save(self, state: LedgerState) -> None:
        """Replace the durable state with ``state``."""
        ...
