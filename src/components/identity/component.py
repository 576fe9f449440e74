"""
Identity component - resolves who is asking.

An authenticated identity always wins over client-supplied fields. A token
that fails verification falls back to the unauthenticated branch on read
paths; paths that require authentication call ``require_authenticated``.
"""

from __future__ import annotations

import logging

from src.domain.entities import User
from src.domain.errors import AuthError, ValidationError

from .models import GUEST, ViewerIdentity
from .ports import TokenVerifierPort, UserLookupPort

logger = logging.getLogger(__name__)


def authenticate(
    auth_token: str | None,
    verifier: TokenVerifierPort,
    users: UserLookupPort,
) -> User | None:
    """Return the user a token belongs to, or None if it does not verify."""
    if not auth_token:
        return None
    user_id = verifier.validate_token(auth_token)
    if user_id is None:
        logger.debug("Token rejected by verifier")
        return None
    try:
        return users.get_user(int(user_id))
    except (TypeError, ValueError):
        return None


def resolve(
    auth_token: str | None,
    claimed_username: str | None = None,
    claimed_email: str | None = None,
    *,
    verifier: TokenVerifierPort,
    users: UserLookupPort,
) -> ViewerIdentity:
    """
    Produce the ViewerIdentity for a request.

    Args:
        auth_token: Raw bearer token, if sent
        claimed_username: Unverified username from body/query
        claimed_email: Unverified email from body/query

    Returns:
        authenticated, anonymous (with hints) or guest identity
    """
    user = authenticate(auth_token, verifier, users)
    if user is not None:
        return ViewerIdentity(
            kind="authenticated",
            user=user,
            claimed_username=claimed_username,
            claimed_email=claimed_email,
        )

    if str(claimed_username or "").strip():
        return ViewerIdentity(
            kind="anonymous",
            claimed_username=claimed_username,
            claimed_email=claimed_email,
        )

    if claimed_email:
        return ViewerIdentity(kind="guest", claimed_email=claimed_email)
    return GUEST


def require_authenticated(
    auth_token: str | None,
    *,
    verifier: TokenVerifierPort,
    users: UserLookupPort,
) -> User:
    """Raise AuthError unless the token verifies to a known user."""
    if not auth_token:
        raise AuthError("Missing authentication token.")
    user = authenticate(auth_token, verifier, users)
    if user is None:
        raise AuthError("Invalid or expired token.")
    return user


def require_fan(identity: ViewerIdentity) -> str:
    """Return the fan username for a write, or raise ValidationError."""
    username = identity.display_username
    if not username:
        raise ValidationError("Missing fan identity (login required or provide fanUsername).")
    return username
