"""
Accounts component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import CreatorProfile, User


@dataclass(frozen=True)
class AccountsConfig:
    """Account rules."""

    password_min_length: int = 6
    username_pattern: str = r"^[a-z0-9_]+$"
    email_pattern: str = r".+@.+\..+"
    token_ttl_minutes: int = 60 * 24


@dataclass(frozen=True)
class Upload:
    """An uploaded file as received from the client."""

    field_name: str
    filename: str | None
    data: bytes
    content_type: str | None = None


# --- Users ---


@dataclass(frozen=True)
class SignupInput:
    email: str | None
    username: str | None
    password: str | None


@dataclass(frozen=True)
class SignupOutput:
    user: User
    verification_token: str


@dataclass(frozen=True)
class LoginInput:
    email: str | None
    password: str | None


@dataclass(frozen=True)
class LoginOutput:
    user: User
    token: str


# --- Creators ---


@dataclass(frozen=True)
class CreateCreatorInput:
    display_name: str | None
    username: str | None
    email: str | None
    account_type: str | None
    price: Any = None
    uploads: dict[str, Upload] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateCreatorInput:
    username: str
    display_name: Any = None
    account_type: Any = None
    price: Any = None


@dataclass(frozen=True)
class CreatorOutput:
    creator: CreatorProfile
