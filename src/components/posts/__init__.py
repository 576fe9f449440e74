"""
Posts component.

Create, update and delete creator posts.
"""

from .component import run_create, run_delete, run_update
from .models import CreatePostInput, DeletePostOutput, PostOutput, UpdatePostInput
from .ports import MediaStorePort, PostRepoPort

__all__ = [
    "run_create",
    "run_delete",
    "run_update",
    "CreatePostInput",
    "DeletePostOutput",
    "PostOutput",
    "UpdatePostInput",
    "MediaStorePort",
    "PostRepoPort",
]
