"""
Posts component - creator content.

Posts are free or pay-per-view. Deleting a post drops its unlock records;
the transactions that paid for them stay in the ledger.
"""

from __future__ import annotations

import logging

from src.domain.entities import Post, coerce_price
from src.domain.errors import NotFoundError, ValidationError

from .models import CreatePostInput, DeletePostOutput, PostOutput, UpdatePostInput
from .ports import MediaStorePort, PostRepoPort

logger = logging.getLogger(__name__)

VISIBILITIES = ("free", "ppv")


def run_create(
    inp: CreatePostInput,
    *,
    repo: PostRepoPort,
    media_store: MediaStorePort | None = None,
) -> PostOutput:
    """Create a post, storing its media in the blob store when given."""
    title = str(inp.title or "").strip()
    visibility = inp.visibility
    if not title or not visibility:
        raise ValidationError("Missing required fields")
    if visibility not in VISIBILITIES:
        raise ValidationError("Invalid visibility")

    media_filename = None
    media_mime = None
    if inp.media is not None and media_store is not None:
        media_filename = media_store.put("media", inp.media.filename, inp.media.data)
        media_mime = inp.media.content_type

    post = repo.add_post(
        Post(
            id=0,
            creator_id=inp.creator.id,
            username=inp.creator.username,
            title=title,
            visibility=visibility,
            price=coerce_price(inp.price) if visibility == "ppv" else None,
            description=str(inp.description) if inp.description else "",
            media_filename=media_filename,
            media_mime=media_mime,
            likes=0,
            liked_by=[],
        )
    )
    logger.info("Post %d created for %s (%s)", post.id, post.username, post.visibility)
    return PostOutput(post=post)


def run_update(inp: UpdatePostInput, *, repo: PostRepoPort) -> PostOutput:
    """
    Update title, visibility, price or description.

    Switching to ``ppv`` keeps the previous price when the new one does not
    parse; switching to ``free`` clears it. A price alone applies only to
    ppv posts.
    """
    post = repo.find_post(inp.creator.username, inp.post_id)
    if post is None:
        raise NotFoundError("Post not found")

    updates: dict[str, object] = {}
    if inp.title is not None:
        clean_title = str(inp.title).strip()
        if clean_title:
            updates["title"] = clean_title

    if inp.visibility is not None:
        if inp.visibility not in VISIBILITIES:
            raise ValidationError("Invalid visibility")
        updates["visibility"] = inp.visibility
        if inp.visibility == "ppv":
            updates["price"] = coerce_price(inp.price, fallback=post.price or 0.0)
        else:
            updates["price"] = None
    elif inp.price is not None and post.visibility == "ppv":
        updates["price"] = coerce_price(inp.price)

    if inp.description is not None:
        updates["description"] = str(inp.description)

    updated = repo.replace_post(post.model_copy(update=updates))
    return PostOutput(post=updated)


def run_delete(creator_username: str, post_id: int, *, repo: PostRepoPort) -> DeletePostOutput:
    removed = repo.delete_post(creator_username, post_id)
    logger.info("Post %d deleted for %s (%d unlocks removed)", post_id, creator_username, removed)
    return DeletePostOutput(post_id=post_id, unlocks_removed=removed)
