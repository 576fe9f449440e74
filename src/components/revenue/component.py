"""
Revenue component.

Read-only fold over the transaction ledger. Nothing is cached; totals are
recomputed from the ledger on every call.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.domain.entities import CreatorProfile, Transaction, canonical_username

from .models import EarningsOutput, EarningsTotals
from .ports import TransactionSourcePort

_TYPE_FIELDS = {
    "tip": "tips",
    "ppv_unlock": "ppv",
    "subscription": "subscriptions",
}


def sum_by_type(transactions: Iterable[Transaction]) -> EarningsTotals:
    """Sum ``amount`` per transaction type."""
    sums = {"tips": 0.0, "ppv": 0.0, "subscriptions": 0.0}
    for txn in transactions:
        bucket = _TYPE_FIELDS.get(txn.type)
        if bucket is not None:
            sums[bucket] += txn.amount or 0.0
    return EarningsTotals(**sums)


def earnings(creator: CreatorProfile, transactions: Iterable[Transaction]) -> EarningsOutput:
    """
    Earnings for ``creator`` over ``transactions``.

    Transactions of other creators are ignored, so the full ledger may be
    passed in.
    """
    key = canonical_username(creator.username)
    matching = [t for t in transactions if canonical_username(t.creator_username) == key]
    return EarningsOutput(
        creator=creator.username,
        totals=sum_by_type(matching),
        transactions=matching,
    )


def run_earnings(creator: CreatorProfile, *, source: TransactionSourcePort) -> EarningsOutput:
    return earnings(creator, source.transactions_for(creator.username))
