"""
Write-behind snapshot writer.

Each committed ledger mutation marks the snapshot dirty; a background
thread saves the latest full state. The pending queue holds at most one
request, so a burst of mutations collapses into a single write.

Crash recovery: the snapshot file is replaced atomically, so after a crash
it holds the last completed write. Mutations committed after that write
are lost. Records carry their own ids and the store deduplicates unlocks
by key on load, so loading a snapshot is idempotent.

Write failures are logged and never raised to the request that caused
the mutation.
"""

from __future__ import annotations

import logging
import queue
import threading

from src.components.ledger import LedgerStore, SnapshotStorePort, save_ledger

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """Single writer of the durable snapshot."""

    def __init__(
        self,
        store: LedgerStore,
        snapshot_store: SnapshotStorePort,
        background: bool = True,
    ) -> None:
        """
        Initialize writer.

        Args:
            store: Ledger to snapshot
            snapshot_store: Durable target
            background: Save on a worker thread; False saves inline on every mutation
        """
        self._store = store
        self._snapshot_store = snapshot_store
        self._background = background
        self._pending: queue.Queue[bool] = queue.Queue(maxsize=1)
        self._write_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.failures = 0

    def notify(self) -> None:
        """Called by the store after each mutation."""
        if not self._background or self._thread is None:
            self.flush()
            return
        try:
            self._pending.put_nowait(True)
        except queue.Full:
            # A write is already queued and will pick up this change
            pass

    def flush(self) -> bool:
        """Write the current state synchronously."""
        with self._write_lock:
            ok = save_ledger(self._store, self._snapshot_store)
        if not ok:
            self.failures += 1
        return ok

    def start(self) -> None:
        """Start the background worker."""
        if not self._background or self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="snapshot-writer", daemon=True)
        self._thread.start()
        logger.info("Snapshot writer started")

    def stop(self) -> None:
        """Stop the worker and write a final snapshot."""
        if self._thread is not None:
            self._stop_event.set()
            self._thread.join(timeout=5.0)
            self._thread = None
        self.flush()
        logger.info("Snapshot writer stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._pending.get(timeout=0.5)
            except queue.Empty:
                continue
            self.flush()
