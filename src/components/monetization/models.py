"""
Monetization component models.

Inputs and outputs of the mutating ledger operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.components.identity import ViewerIdentity
from src.domain.entities import (
    CreatorProfile,
    Subscription,
    Transaction,
    UnlockRecord,
)

# --- Configuration ---


@dataclass(frozen=True)
class MonetizationConfig:
    """Monetization configuration from rules."""

    currency: str = "USD"
    subscription_days: int = 30
    tip_message_max: int = 500


# --- Tips ---


@dataclass(frozen=True)
class TipInput:
    creator: CreatorProfile
    viewer: ViewerIdentity
    amount: Any
    message: str | None = None
    post_id: Any = None


@dataclass(frozen=True)
class TipOutput:
    transaction: Transaction


# --- PPV Unlock ---


@dataclass(frozen=True)
class UnlockInput:
    creator: CreatorProfile
    viewer: ViewerIdentity
    post_id: int


@dataclass(frozen=True)
class UnlockOutput:
    unlocked_post_id: int
    record: UnlockRecord
    transaction: Transaction | None = None
    already_unlocked: bool = False


# --- Subscribe ---


@dataclass(frozen=True)
class SubscribeInput:
    creator: CreatorProfile
    viewer: ViewerIdentity


@dataclass(frozen=True)
class SubscribeOutput:
    subscription: Subscription
    transaction: Transaction | None = None
    already_subscribed: bool = False


# --- Like ---


@dataclass(frozen=True)
class LikeInput:
    creator: CreatorProfile
    viewer: ViewerIdentity
    post_id: int


@dataclass(frozen=True)
class LikeOutput:
    post_id: int
    likes: int
    liked_by_me: bool
