"""
Revenue component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import Transaction


@dataclass(frozen=True)
class EarningsTotals:
    tips: float = 0.0
    ppv: float = 0.0
    subscriptions: float = 0.0

    @property
    def all_time(self) -> float:
        return self.tips + self.ppv + self.subscriptions


@dataclass(frozen=True)
class EarningsOutput:
    """Totals per transaction type plus the matching transactions for audit."""

    creator: str
    totals: EarningsTotals
    transactions: list[Transaction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "creator": self.creator,
            "totals": {
                "tips": self.totals.tips,
                "ppv": self.totals.ppv,
                "subscriptions": self.totals.subscriptions,
                "allTime": self.totals.all_time,
            },
            "transactions": [
                t.model_dump(mode="json", by_alias=True) for t in self.transactions
            ],
        }
