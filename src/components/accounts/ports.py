"""
Accounts component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import CreatorProfile, User


class AccountsRepoPort(Protocol):
    def add_user(self, user: User) -> User: ...
    def replace_user(self, user: User) -> User: ...
    def find_user_by_email(self, email: str) -> User | None: ...
    def find_user_by_username(self, username: str) -> User | None: ...
    def find_user_by_verification_token(self, token: str) -> User | None: ...
    def add_creator(self, creator: CreatorProfile) -> CreatorProfile: ...
    def replace_creator(self, creator: CreatorProfile) -> CreatorProfile: ...
    def find_creator(self, username: str) -> CreatorProfile | None: ...
    def list_creators(self) -> list[CreatorProfile]: ...


class AuthAdapterPort(Protocol):
    def hash_password(self, password: str) -> str: ...
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def create_token(self, user_id: object, ttl_minutes: int) -> str: ...


class UploadStorePort(Protocol):
    def put(self, field_name: str, original_name: str | None, data: bytes) -> str: ...
