"""
Revenue component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import Transaction


class TransactionSourcePort(Protocol):
    def transactions_for(self, creator_username: str) -> list[Transaction]:
        """Every transaction whose creator username canonically matches."""
        ...
