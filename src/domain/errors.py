"""
Ledger error taxonomy.

Every component raises one of these; the API shell maps them to HTTP
status codes. None of them is raised after a mutation has been applied.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base ledger error."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(LedgerError):
    """Malformed, missing or out-of-range input."""

    status_code = 400


class NotFoundError(LedgerError):
    """Unknown creator, post or user."""

    status_code = 404


class ConflictError(LedgerError):
    """Duplicate username or email at creation time."""

    status_code = 409

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class AuthError(LedgerError):
    """Missing, invalid or expired credentials on a path that requires them."""

    status_code = 401
