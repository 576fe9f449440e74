"""
Monetization component ports.

The slice of the ledger store the operations need. LedgerStore satisfies
it; tests may pass the real store.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol

from src.components.ledger import SubscriptionAppendResult, UnlockAppendResult
from src.domain.entities import Post, Transaction


class LedgerPort(Protocol):
    def find_post(self, creator_username: str, post_id: int) -> Post | None: ...

    def append_transaction(self, **fields: Any) -> Transaction: ...

    def add_unlock_if_absent(
        self,
        creator_username: str,
        fan_username: str,
        post_id: int,
        now: datetime,
        **txn_fields: Any,
    ) -> UnlockAppendResult: ...

    def add_subscription_if_no_active(
        self,
        creator_username: str,
        fan_username: str,
        price: float,
        now: datetime,
        duration: timedelta,
        fan_email: str | None = None,
        currency: str = "USD",
    ) -> SubscriptionAppendResult: ...

    def toggle_like(
        self, creator_username: str, post_id: int, fan_username: str
    ) -> tuple[Post, bool]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
