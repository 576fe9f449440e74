"""
Posts component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.components.accounts import Upload
from src.domain.entities import CreatorProfile, Post


@dataclass(frozen=True)
class CreatePostInput:
    creator: CreatorProfile
    title: Any
    visibility: Any
    price: Any = None
    description: Any = None
    media: Upload | None = None


@dataclass(frozen=True)
class UpdatePostInput:
    creator: CreatorProfile
    post_id: int
    title: Any = None
    visibility: Any = None
    price: Any = None
    description: Any = None


@dataclass(frozen=True)
class PostOutput:
    post: Post


@dataclass(frozen=True)
class DeletePostOutput:
    post_id: int
    unlocks_removed: int
