"""
Posts component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import Post


class PostRepoPort(Protocol):
    def add_post(self, post: Post) -> Post: ...
    def replace_post(self, post: Post) -> Post: ...
    def find_post(self, creator_username: str, post_id: int) -> Post | None: ...

    def delete_post(self, creator_username: str, post_id: int) -> int:
        """Remove the post and its unlock records; return records removed."""
        ...


class MediaStorePort(Protocol):
    def put(self, field_name: str, original_name: str | None, data: bytes) -> str: ...
