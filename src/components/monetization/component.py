"""
Monetization component.

The mutating operations of the ledger: tip, PPV unlock, subscribe, like.
Each validates its input, then makes one atomic call into the ledger
store. Unlock and subscribe are idempotent: a repeat is a success with an
"already" flag and writes nothing.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Any

from src.components.identity import require_fan
from src.domain.entities import ANONYMOUS_FAN
from src.domain.errors import NotFoundError, ValidationError
from src.rules.models import Rules

from .models import (
    LikeInput,
    LikeOutput,
    MonetizationConfig,
    SubscribeInput,
    SubscribeOutput,
    TipInput,
    TipOutput,
    UnlockInput,
    UnlockOutput,
)
from .ports import LedgerPort, TimePort

# --- Pure Functions ---


def parse_amount(value: Any) -> float:
    """
    Parse a tip amount.

    Accepts numbers and numeric strings. Raises ValidationError unless the
    result is finite and strictly positive.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Please provide a valid tip amount.")
    try:
        amount = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise ValidationError("Please provide a valid tip amount.") from None
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Please provide a valid tip amount.")
    return amount


def parse_post_id(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid post id.") from None


def truncate_message(message: Any, limit: int) -> str:
    return ("" if message is None else str(message))[:limit]


# --- Operations ---


def run_tip(
    inp: TipInput,
    *,
    ledger: LedgerPort,
    time: TimePort,
    config: MonetizationConfig | None = None,
) -> TipOutput:
    """
    Record a tip. Every call appends a new transaction.

    Tips tolerate a missing fan identity and record it as ``anonymous``.
    """
    config = config or MonetizationConfig()
    amount = parse_amount(inp.amount)
    post_id = parse_post_id(inp.post_id)

    txn = ledger.append_transaction(
        type="tip",
        creator_username=inp.creator.username,
        fan_username=inp.viewer.display_username or ANONYMOUS_FAN,
        fan_email=inp.viewer.email,
        amount=amount,
        currency=config.currency,
        message=truncate_message(inp.message, config.tip_message_max),
        post_id=post_id,
        created_at=time.now_utc(),
    )
    return TipOutput(transaction=txn)


def run_unlock(
    inp: UnlockInput,
    *,
    ledger: LedgerPort,
    time: TimePort,
    config: MonetizationConfig | None = None,
) -> UnlockOutput:
    """
    Unlock a PPV post for a fan, at most once per (creator, fan, post).

    Raises:
        NotFoundError: post missing or owned by another creator
        ValidationError: post is not a priced ppv post, or no fan identity
    """
    config = config or MonetizationConfig()
    post = ledger.find_post(inp.creator.username, inp.post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if post.visibility != "ppv" or post.price is None or post.price <= 0:
        raise ValidationError("This post is not a paid PPV post.")

    fan = require_fan(inp.viewer)
    result = ledger.add_unlock_if_absent(
        inp.creator.username,
        fan,
        post.id,
        time.now_utc(),
        fan_email=inp.viewer.email,
        amount=post.price,
        currency=config.currency,
    )
    return UnlockOutput(
        unlocked_post_id=post.id,
        record=result.record,
        transaction=result.transaction,
        already_unlocked=not result.created,
    )


def run_subscribe(
    inp: SubscribeInput,
    *,
    ledger: LedgerPort,
    time: TimePort,
    config: MonetizationConfig | None = None,
) -> SubscribeOutput:
    """
    Subscribe a fan to a creator for ``subscription_days``.

    While an unexpired subscription exists the call returns it unchanged.

    Raises:
        ValidationError: creator has no priced subscription plan, or no fan identity
    """
    config = config or MonetizationConfig()
    creator = inp.creator
    if creator.account_type != "subscription":
        raise ValidationError("This creator does not have a subscription plan.")
    if creator.price is None or creator.price <= 0:
        raise ValidationError("This creator's subscription price is not configured.")

    fan = require_fan(inp.viewer)
    result = ledger.add_subscription_if_no_active(
        creator.username,
        fan,
        creator.price,
        time.now_utc(),
        timedelta(days=config.subscription_days),
        fan_email=inp.viewer.email,
        currency=config.currency,
    )
    return SubscribeOutput(
        subscription=result.subscription,
        transaction=result.transaction,
        already_subscribed=not result.created,
    )


def run_like(inp: LikeInput, *, ledger: LedgerPort) -> LikeOutput:
    """Toggle the fan's like on a post. No anonymous likes."""
    if ledger.find_post(inp.creator.username, inp.post_id) is None:
        raise NotFoundError("Post not found")
    fan = require_fan(inp.viewer)
    post, liked = ledger.toggle_like(inp.creator.username, inp.post_id, fan)
    return LikeOutput(post_id=post.id, likes=post.likes, liked_by_me=liked)


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: TipInput | UnlockInput | SubscribeInput | LikeInput,
    *,
    ledger: LedgerPort,
    time: TimePort,
    config: MonetizationConfig | None = None,
) -> TipOutput | UnlockOutput | SubscribeOutput | LikeOutput:
    """
    Run a monetization operation based on input type.

    This is the main entry point following the atomic component pattern.
    """
    if isinstance(input_data, TipInput):
        return run_tip(input_data, ledger=ledger, time=time, config=config)

    if isinstance(input_data, UnlockInput):
        return run_unlock(input_data, ledger=ledger, time=time, config=config)

    if isinstance(input_data, SubscribeInput):
        return run_subscribe(input_data, ledger=ledger, time=time, config=config)

    if isinstance(input_data, LikeInput):
        return run_like(input_data, ledger=ledger)

    raise TypeError(f"Unknown input type: {type(input_data)}")


# --- Configuration Loader ---


def load_config_from_rules(rules: Rules) -> MonetizationConfig:
    """Build MonetizationConfig from the ``monetization`` rules section."""
    section = rules.monetization
    return MonetizationConfig(
        currency=section.currency,
        subscription_days=section.subscription_days,
        tip_message_max=section.tip_message_max,
    )
