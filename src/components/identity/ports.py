"""
Identity component - Port interfaces.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import User


class TokenVerifierPort(Protocol):
    """External authentication service: token -> user id or None."""

    def validate_token(self, token: str) -> Any | None: ...


class UserLookupPort(Protocol):
    def get_user(self, user_id: int) -> User | None: ...
