"""
Entitlement component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from src.components.identity import ViewerIdentity
from src.domain.entities import CreatorProfile, Post, Subscription, UnlockRecord

GateName = Literal["subscription", "ppv"]


@dataclass(frozen=True)
class EntitlementDecision:
    """Lock decision with the gates that were left unsatisfied."""

    locked: bool
    failed_gates: tuple[GateName, ...] = ()
    owner_bypass: bool = False


@dataclass(frozen=True)
class ListPostsInput:
    """Input for projecting a creator's posts for one viewer."""

    viewer: ViewerIdentity
    creator: CreatorProfile
    posts: list[Post]
    subscriptions: list[Subscription] = field(default_factory=list)
    unlocks: list[UnlockRecord] = field(default_factory=list)
    now: datetime | None = None
