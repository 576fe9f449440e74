"""
Ledger component - Data models.

The persisted snapshot document and the results of the idempotent
check-then-append operations.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from src.domain.entities import (
    CreatorProfile,
    Entity,
    Message,
    Post,
    Subscription,
    Transaction,
    UnlockRecord,
    User,
)


class LedgerState(Entity):
    """
    Full snapshot of the ledger.

    Serialised with camelCase keys, so the seven collections appear as
    ``users, creators, posts, transactions, subscriptions, unlockedPosts,
    messages``. ``lastIds`` holds the highest id ever issued per collection,
    so ids of removed records are not handed out again after a reload.
    """

    users: list[User] = Field(default_factory=list)
    creators: list[CreatorProfile] = Field(default_factory=list)
    posts: list[Post] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    subscriptions: list[Subscription] = Field(default_factory=list)
    unlocked_posts: list[UnlockRecord] = Field(default_factory=list)
    messages: list[Message] = Field(default_factory=list)
    last_ids: dict[str, int] = Field(default_factory=dict)


@dataclass(frozen=True)
class UnlockAppendResult:
    """Outcome of an unlock append; ``created`` is False for a repeat."""

    record: UnlockRecord
    transaction: Transaction | None
    created: bool


@dataclass(frozen=True)
class SubscriptionAppendResult:
    """Outcome of a subscription append; ``created`` is False while one is active."""

    subscription: Subscription
    transaction: Transaction | None
    created: bool
