"""
Identity component.

Turns an optional auth token and optional claimed fields into a
ViewerIdentity.
"""

from .component import (
    authenticate,
    require_authenticated,
    require_fan,
    resolve,
)
from .models import GUEST, IdentityKind, ViewerIdentity
from .ports import TokenVerifierPort, UserLookupPort

__all__ = [
    # Functions
    "authenticate",
    "require_authenticated",
    "require_fan",
    "resolve",
    # Models
    "GUEST",
    "IdentityKind",
    "ViewerIdentity",
    # Ports
    "TokenVerifierPort",
    "UserLookupPort",
]
