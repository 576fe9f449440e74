import math
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# --- Enums / Literals ---
RoleType = Literal["fan", "creator"]
AccountType = Literal["free", "subscription"]
CreatorStatus = Literal["pending", "approved", "rejected"]
PostVisibility = Literal["free", "ppv"]
SubscriptionStatus = Literal["active"]
TransactionType = Literal["tip", "ppv_unlock", "subscription"]

ANONYMOUS_FAN = "anonymous"
DEFAULT_CURRENCY = "USD"


class Entity(BaseModel):
    """Base for persisted records; serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def utcnow() -> datetime:
    return datetime.now(UTC)


def canonical_username(value: object) -> str:
    """Trimmed, lowercased form used for every username comparison."""
    if value is None:
        return ""
    return str(value).strip().lower()


def coerce_price(value: object, fallback: float = 0.0) -> float:
    """Parse a price leniently; anything unparsable, non-finite or zero yields ``fallback``."""
    if value is None or isinstance(value, bool):
        return fallback
    try:
        price = float(str(value).strip()) if isinstance(value, str) else float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(price) or price == 0:
        return fallback
    return price


# --- Accounts ---

class User(Entity):
    id: int
    email: str
    username: str
    password_hash: str
    role: RoleType = "fan"
    email_verified: bool = False
    verification_token: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

class CreatorProfile(Entity):
    id: int
    display_name: str
    username: str
    email: str
    account_type: AccountType
    price: float | None = None
    id_front_path: str | None = None
    id_back_path: str | None = None
    selfie_path: str | None = None
    status: CreatorStatus = "pending"
    created_at: datetime = Field(default_factory=utcnow)

# --- Content ---

class Post(Entity):
    id: int
    creator_id: int
    username: str
    title: str
    visibility: PostVisibility
    price: float | None = None
    description: str = ""
    media_filename: str | None = None
    media_mime: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    likes: int = 0
    liked_by: list[str] = Field(default_factory=list)

# --- Ledger ---

class Subscription(Entity):
    id: int
    creator_username: str
    fan_username: str
    fan_email: str | None = None
    price: float
    currency: str = DEFAULT_CURRENCY
    status: SubscriptionStatus = "active"
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        return self.status == "active" and (self.expires_at is None or self.expires_at > now)

class UnlockRecord(Entity):
    creator_username: str
    fan_username: str
    post_id: int
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def key(self) -> tuple[str, str, int]:
        return (
            canonical_username(self.creator_username),
            canonical_username(self.fan_username),
            self.post_id,
        )

class Transaction(Entity):
    id: int
    type: TransactionType
    creator_username: str
    fan_username: str
    fan_email: str | None = None
    amount: float
    currency: str = DEFAULT_CURRENCY
    post_id: int | None = None
    message: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

class Message(Entity):
    id: int
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
