from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from src.adapters.clock import SystemClock
from src.adapters.fs.uploads import UploadStore
from src.api.deps import ViewerResolver, get_clock, get_ledger, get_upload_store, get_viewer_resolver
from src.api.routes.creators import read_upload
from src.api.schemas import PostUpdateRequest
from src.components.accounts import get_creator
from src.components.entitlement import ListPostsInput, list_creator_posts
from src.components.ledger import LedgerStore
from src.components.posts import (
    CreatePostInput,
    UpdatePostInput,
    run_create,
    run_delete,
    run_update,
)

router = APIRouter()


@router.get("/{username}/posts")
def list_posts(
    username: str,
    fan_username: str | None = Query(None, alias="fanUsername"),
    ledger: LedgerStore = Depends(get_ledger),
    viewer_for: ViewerResolver = Depends(get_viewer_resolver),
    clock: SystemClock = Depends(get_clock),
) -> list[dict[str, Any]]:
    """
    Posts of a creator with a ``locked`` flag per post.

    ``fanUsername`` is an unverified hint, ignored when a valid token is sent.
    """
    creator = get_creator(username, repo=ledger)
    viewer = viewer_for(fan_username)
    fan = viewer.fan_username

    # One consistent view of the ledger for the whole listing
    with ledger.reading():
        posts = ledger.creator_posts(creator.username)
        subscriptions = ledger.subscriptions_for(creator.username, fan) if fan else []
        unlocks = ledger.unlocks_for(creator.username, fan) if fan else []

    return list_creator_posts(
        ListPostsInput(
            viewer=viewer,
            creator=creator,
            posts=posts,
            subscriptions=subscriptions,
            unlocks=unlocks,
            now=clock.now_utc(),
        )
    )


@router.post("/{username}/posts")
async def create_post(
    username: str,
    title: str | None = Form(None),
    visibility: str | None = Form(None),
    price: str | None = Form(None),
    description: str | None = Form(None),
    media: UploadFile | None = File(None),
    ledger: LedgerStore = Depends(get_ledger),
    files: UploadStore = Depends(get_upload_store),
) -> dict[str, Any]:
    creator = get_creator(username, repo=ledger)
    result = run_create(
        CreatePostInput(
            creator=creator,
            title=title,
            visibility=visibility,
            price=price,
            description=description,
            media=await read_upload("media", media),
        ),
        repo=ledger,
        media_store=files,
    )
    return {"success": True, "post": result.post.model_dump(mode="json", by_alias=True)}


@router.patch("/{username}/posts/{post_id}")
def update_post(
    username: str,
    post_id: int,
    req: PostUpdateRequest,
    ledger: LedgerStore = Depends(get_ledger),
) -> dict[str, Any]:
    creator = get_creator(username, repo=ledger)
    result = run_update(
        UpdatePostInput(
            creator=creator,
            post_id=post_id,
            title=req.title,
            visibility=req.visibility,
            price=req.price,
            description=req.description,
        ),
        repo=ledger,
    )
    return {"success": True, "post": result.post.model_dump(mode="json", by_alias=True)}


@router.delete("/{username}/posts/{post_id}")
def delete_post(
    username: str,
    post_id: int,
    ledger: LedgerStore = Depends(get_ledger),
) -> dict[str, Any]:
    creator = get_creator(username, repo=ledger)
    run_delete(creator.username, post_id, repo=ledger)
    return {"success": True}
