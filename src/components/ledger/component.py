"""
Ledger component - store construction and snapshot boundary.

Shell Layer - the only place the ledger touches durable state.
"""

from __future__ import annotations

import logging

from ._impl import LedgerStore
from .ports import SnapshotStorePort

logger = logging.getLogger(__name__)


def open_ledger(snapshot_store: SnapshotStorePort | None = None) -> LedgerStore:
    """
    Construct the process-wide store, seeded from the last snapshot if any.

    Args:
        snapshot_store: Durable snapshot source; None starts empty

    Returns:
        A loaded LedgerStore
    """
    store = LedgerStore()
    if snapshot_store is None:
        return store

    state = snapshot_store.load()
    if state is None:
        logger.info("No snapshot found, starting with an empty ledger")
    else:
        store.load_state(state)
    return store


def save_ledger(store: LedgerStore, snapshot_store: SnapshotStorePort) -> bool:
    """
    Write the whole ledger to ``snapshot_store``.

    A failed write is logged and reported as False; the in-memory ledger
    stays authoritative.
    """
    try:
        snapshot_store.save(store.to_state())
    except Exception:
        logger.exception("Snapshot write failed")
        return False
    return True
