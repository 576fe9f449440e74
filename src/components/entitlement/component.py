"""
Entitlement component.

Pure functions deciding whether a post is visible to a viewer and building
the redacted projection the read path returns.

Gates, in order:
1. Owner bypass - the creator, authenticated, sees everything.
2. Subscription gate - subscription creators, non-free posts.
3. PPV gate - every ppv post, in addition to the subscription gate.
A gate that needs a fan identity fails when there is none.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from src.components.identity import ViewerIdentity
from src.domain.entities import (
    CreatorProfile,
    Post,
    Subscription,
    UnlockRecord,
    canonical_username,
)

from .models import EntitlementDecision, GateName, ListPostsInput

logger = logging.getLogger(__name__)


def has_active_subscription(
    subscriptions: Iterable[Subscription],
    creator_username: str,
    fan_username: str | None,
    now: datetime,
) -> bool:
    if not fan_username:
        return False
    creator_key = canonical_username(creator_username)
    fan_key = canonical_username(fan_username)
    return any(
        canonical_username(s.creator_username) == creator_key
        and canonical_username(s.fan_username) == fan_key
        and s.is_active(now)
        for s in subscriptions
    )


def has_unlock(
    unlocks: Iterable[UnlockRecord],
    creator_username: str,
    fan_username: str | None,
    post_id: int,
) -> bool:
    if not fan_username:
        return False
    key = (canonical_username(creator_username), canonical_username(fan_username), post_id)
    return any(record.key == key for record in unlocks)


def decide(
    viewer: ViewerIdentity,
    creator: CreatorProfile,
    post: Post,
    subscriptions: Iterable[Subscription],
    unlocks: Iterable[UnlockRecord],
    now: datetime,
) -> EntitlementDecision:
    """Evaluate every gate and report which ones failed."""
    if viewer.is_creator(creator.username):
        return EntitlementDecision(locked=False, owner_bypass=True)

    fan = viewer.fan_username
    failed: list[GateName] = []

    if creator.account_type == "subscription" and post.visibility != "free":
        if not has_active_subscription(subscriptions, creator.username, fan, now):
            failed.append("subscription")

    if post.visibility == "ppv":
        if not has_unlock(unlocks, creator.username, fan, post.id):
            failed.append("ppv")

    return EntitlementDecision(locked=bool(failed), failed_gates=tuple(failed))


def compute_locked(
    viewer: ViewerIdentity,
    creator: CreatorProfile,
    post: Post,
    subscriptions: Iterable[Subscription],
    unlocks: Iterable[UnlockRecord],
    now: datetime,
) -> bool:
    """True when any applicable gate is unsatisfied for this viewer."""
    return decide(viewer, creator, post, subscriptions, unlocks, now).locked


def project_post(post: Post, locked: bool) -> dict[str, Any]:
    """
    Serialise a post for the read path.

    Locked posts lose their media handle and description; title, price,
    visibility and likes stay visible.
    """
    out = post.model_dump(mode="json", by_alias=True)
    out["locked"] = locked
    if locked:
        out["mediaFilename"] = None
        out["description"] = ""
    return out


def list_creator_posts(inp: ListPostsInput) -> list[dict[str, Any]]:
    """Project every post in ``inp.posts`` for ``inp.viewer``, keeping order."""
    now = inp.now or datetime.now(UTC)
    # Materialise once; the gates iterate them per post
    subscriptions = list(inp.subscriptions)
    unlocks = list(inp.unlocks)

    projections = []
    for post in inp.posts:
        decision = decide(inp.viewer, inp.creator, post, subscriptions, unlocks, now)
        logger.debug(
            "Post %d for %s: locked=%s gates=%s",
            post.id,
            inp.viewer.fan_username or inp.viewer.kind,
            decision.locked,
            ",".join(decision.failed_gates) or "-",
        )
        projections.append(project_post(post, decision.locked))
    return projections
