"""
JSON snapshot adapter (SnapshotStorePort implementation).

Stores the whole ledger as one pretty-printed JSON document. Writes go to
a temporary file in the same directory and are moved into place with
os.replace, so the file on disk is always a complete snapshot.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from src.components.ledger.models import LedgerState

logger = logging.getLogger(__name__)


class JsonSnapshotStore:
    """File-backed snapshot store."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> LedgerState | None:
        """
        Read the snapshot.

        Returns None when the file does not exist. Raises ValueError when
        it exists but cannot be parsed, so a corrupt file is never silently
        replaced by an empty ledger.
        """
        if not self.path.exists():
            return None
        with open(self.path, encoding="utf-8") as f:
            raw = f.read()
        if not raw.strip():
            return None
        try:
            return LedgerState.model_validate(json.loads(raw))
        except ValueError as e:
            raise ValueError(f"Snapshot at {self.path} is unreadable: {e}") from e

    def save(self, state: LedgerState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = state.model_dump_json(by_alias=True, indent=2)
        fd, tmp_name = tempfile.mkstemp(prefix=".snapshot-", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        logger.debug("Snapshot written to %s (%d bytes)", self.path, len(payload))


class InMemorySnapshotStore:
    """Snapshot store that keeps the last saved state in memory."""

    def __init__(self, state: LedgerState | None = None) -> None:
        self.state = state
        self.saves = 0

    def load(self) -> LedgerState | None:
        return self.state.model_copy(deep=True) if self.state else None

    def save(self, state: LedgerState) -> None:
        self.state = state.model_copy(deep=True)
        self.saves += 1
