"""
Monetization component.

Public API for the mutating ledger operations: tips, PPV unlocks,
subscriptions and likes.
"""

from .component import (
    load_config_from_rules,
    parse_amount,
    parse_post_id,
    run,
    run_like,
    run_subscribe,
    run_tip,
    run_unlock,
    truncate_message,
)
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

__all__ = [
    # Functions
    "run",
    "run_tip",
    "run_unlock",
    "run_subscribe",
    "run_like",
    "parse_amount",
    "parse_post_id",
    "truncate_message",
    "load_config_from_rules",
    # Models
    "LikeInput",
    "LikeOutput",
    "MonetizationConfig",
    "SubscribeInput",
    "SubscribeOutput",
    "TipInput",
    "TipOutput",
    "UnlockInput",
    "UnlockOutput",
    # Ports
    "LedgerPort",
    "TimePort",
]
