"""
Ledger component.

Append-only record of subscriptions, unlocks and transactions, plus the
user, creator and post repositories it is resolved against.
"""

from ._impl import LedgerStore, Repository, normalize_post
from .component import open_ledger, save_ledger
from .models import LedgerState, SubscriptionAppendResult, UnlockAppendResult
from .ports import SnapshotStorePort

__all__ = [
    # Store
    "LedgerStore",
    "Repository",
    "normalize_post",
    # Functions
    "open_ledger",
    "save_ledger",
    # Models
    "LedgerState",
    "SubscriptionAppendResult",
    "UnlockAppendResult",
    # Ports
    "SnapshotStorePort",
]
