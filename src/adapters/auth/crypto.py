"""
Password hashing and bearer tokens.

Passwords are hashed with argon2 through passlib. Tokens are HS256 JWTs
whose ``sub`` claim is the user id; python-jose checks ``exp`` on decode.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext

DEFAULT_ALGORITHM = "HS256"


class JWTAuthAdapter:
    """Signs and verifies tokens with a shared secret."""

    pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

    def __init__(self, secret_key: str, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm

    def hash_password(self, password: str) -> str:
        return cast(str, self.pwd_context.hash(password))

    def verify_password(self, plain: str, hashed: str) -> bool:
        try:
            return cast(bool, self.pwd_context.verify(plain, hashed))
        except ValueError:
            # Not a hash passlib recognises
            return False

    def create_token(self, user_id: Any, ttl_minutes: int, now: datetime | None = None) -> str:
        """
        Issue a token for ``user_id``.

        Args:
            user_id: Stored as the ``sub`` claim
            ttl_minutes: Lifetime of the token
            now: Issue time (for tests); defaults to the current UTC time
        """
        issued = now if now is not None else datetime.now(UTC)
        claims = {"sub": str(user_id), "exp": issued + timedelta(minutes=ttl_minutes)}
        return cast(str, jwt.encode(claims, self._secret_key, algorithm=self._algorithm))

    def decode(self, token: str) -> dict[str, Any] | None:
        """Claims of a valid, unexpired token, else None."""
        try:
            return cast(dict[str, Any], jwt.decode(token, self._secret_key, algorithms=[self._algorithm]))
        except JWTError:
            return None

    def validate_token(self, token: str) -> int | None:
        claims = self.decode(token)
        if not claims:
            return None
        try:
            return int(claims.get("sub"))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
