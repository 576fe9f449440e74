"""
Identity component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from src.domain.entities import User, canonical_username

IdentityKind = Literal["authenticated", "anonymous", "guest"]


@dataclass(frozen=True)
class ViewerIdentity:
    """
    Who is making a request.

    ``authenticated`` carries a verified User; ``anonymous`` carries only
    client-supplied hints; ``guest`` carries nothing.
    """

    kind: IdentityKind = "guest"
    user: User | None = None
    claimed_username: str | None = None
    claimed_email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.kind == "authenticated" and self.user is not None

    @property
    def fan_username(self) -> str | None:
        """Canonical username to match ledger records against, if any."""
        user = self.user
        if self.kind == "authenticated" and user is not None:
            return canonical_username(user.username) or None
        return canonical_username(self.claimed_username) or None

    @property
    def display_username(self) -> str | None:
        """Username as it should be written into new ledger records (trimmed)."""
        user = self.user
        if self.kind == "authenticated" and user is not None:
            return user.username.strip() or None
        return str(self.claimed_username or "").strip() or None

    @property
    def email(self) -> str | None:
        user = self.user
        if self.kind == "authenticated" and user is not None:
            return user.email
        return str(self.claimed_email or "").strip() or None

    def is_creator(self, creator_username: str) -> bool:
        """True for an authenticated creator-role user whose username matches."""
        user = self.user
        return (
            self.kind == "authenticated"
            and user is not None
            and user.role == "creator"
            and canonical_username(user.username) == canonical_username(creator_username)
        )


GUEST = ViewerIdentity()
