"""
Upload store - identity documents and post media on local disk.

Handles are paths relative to the store root; they are what the ledger
records (``CreatorProfile.selfie_path``, ``Post.media_filename``) and what
``/uploads/<handle>`` serves. Every upload gets a fresh name, so a handle
never points at bytes other than the ones it was created for.
"""

from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class UploadStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def new_name(field_name: str, original_name: str | None) -> str:
        """``<field>-<millis>-<random><ext>``, keeping the client's extension."""
        ext = Path(original_name or "").suffix
        return f"{field_name}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"

    def resolve(self, handle: str) -> Path:
        """Absolute path for ``handle``. Raises ValueError outside the root."""
        target = (self.root / handle).resolve()
        if not target.is_relative_to(self.root):
            raise ValueError(f"Upload handle escapes the store: {handle}")
        return target

    def put(self, field_name: str, original_name: str | None, data: bytes) -> str:
        """Write ``data`` under a new name and return its handle."""
        handle = self.new_name(field_name, original_name)
        self.resolve(handle).write_bytes(data)
        logger.info("Stored %s upload as %s (%d bytes)", field_name, handle, len(data))
        return handle

    def read(self, handle: str) -> bytes:
        target = self.resolve(handle)
        if not target.is_file():
            raise FileNotFoundError(f"No upload named {handle}")
        return target.read_bytes()
