from pydantic import BaseModel, Field


class MonetizationRules(BaseModel):
    currency: str = "USD"
    subscription_days: int = Field(default=30, gt=0)
    tip_message_max: int = Field(default=500, ge=0)


class AccountsRules(BaseModel):
    password_min_length: int = Field(default=6, ge=1)
    username_pattern: str = r"^[a-z0-9_]+$"
    email_pattern: str = r".+@.+\..+"
    token_ttl_minutes: int = Field(default=60 * 24, gt=0)


class StorageRules(BaseModel):
    snapshot_file: str = "data.json"
    uploads_dir: str = "uploads"
    write_behind: bool = True


class Rules(BaseModel):
    monetization: MonetizationRules = Field(default_factory=MonetizationRules)
    accounts: AccountsRules = Field(default_factory=AccountsRules)
    storage: StorageRules = Field(default_factory=StorageRules)
