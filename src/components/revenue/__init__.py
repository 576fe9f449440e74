"""
Revenue component.

Earnings per creator, grouped by transaction type.
"""

from .component import earnings, run_earnings, sum_by_type
from .models import EarningsOutput, EarningsTotals
from .ports import TransactionSourcePort

__all__ = [
    "earnings",
    "run_earnings",
    "sum_by_type",
    "EarningsOutput",
    "EarningsTotals",
    "TransactionSourcePort",
]
