from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body with camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth ---
class SignupRequest(CamelModel):
    email: str | None = None
    username: str | None = None
    password: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


# --- Creators ---
class CreatorUpdateRequest(CamelModel):
    display_name: Any = None
    account_type: Any = None
    price: Any = None


# --- Posts ---
class PostUpdateRequest(CamelModel):
    title: Any = None
    visibility: Any = None
    price: Any = None
    description: Any = None


# --- Monetization ---
class FanIdentityRequest(CamelModel):
    fan_username: str | None = None
    fan_email: str | None = None


class TipRequest(FanIdentityRequest):
    amount: Any = None
    message: Any = None
    post_id: Any = None


class LikeRequest(CamelModel):
    fan_username: str | None = None
