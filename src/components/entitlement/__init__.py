"""
Entitlement component.

Decides, per viewer and post, whether content is locked, and redacts
locked posts.
"""

from .component import (
    compute_locked,
    decide,
    has_active_subscription,
    has_unlock,
    list_creator_posts,
    project_post,
)
from .models import EntitlementDecision, GateName, ListPostsInput

__all__ = [
    # Functions
    "compute_locked",
    "decide",
    "has_active_subscription",
    "has_unlock",
    "list_creator_posts",
    "project_post",
    # Models
    "EntitlementDecision",
    "GateName",
    "ListPostsInput",
]
