from typing import Any

from fastapi import APIRouter, Depends

from src.adapters.clock import SystemClock
from src.api.deps import (
    ViewerResolver,
    get_clock,
    get_ledger,
    get_monetization_config,
    get_viewer_resolver,
)
from src.api.schemas import FanIdentityRequest, LikeRequest, TipRequest
from src.components.accounts import get_creator
from src.components.ledger import LedgerStore
from src.components.monetization import (
    LikeInput,
    MonetizationConfig,
    SubscribeInput,
    TipInput,
    UnlockInput,
    run_like,
    run_subscribe,
    run_tip,
    run_unlock,
)
from src.components.revenue import run_earnings

router = APIRouter()


def _dump(model: Any) -> dict[str, Any] | None:
    return model.model_dump(mode="json", by_alias=True) if model is not None else None


@router.post("/{username}/tips")
def tip_creator(
    username: str,
    req: TipRequest | None = None,
    ledger: LedgerStore = Depends(get_ledger),
    viewer_for: ViewerResolver = Depends(get_viewer_resolver),
    clock: SystemClock = Depends(get_clock),
    config: MonetizationConfig = Depends(get_monetization_config),
) -> dict[str, Any]:
    req = req or TipRequest()
    creator = get_creator(username, repo=ledger)
    result = run_tip(
        TipInput(
            creator=creator,
            viewer=viewer_for(req.fan_username, req.fan_email),
            amount=req.amount,
            message=req.message,
            post_id=req.post_id,
        ),
        ledger=ledger,
        time=clock,
        config=config,
    )
    return {"success": True, "transaction": _dump(result.transaction)}


@router.post("/{username}/posts/{post_id}/unlock")
def unlock_post(
    username: str,
    post_id: int,
    req: FanIdentityRequest | None = None,
    ledger: LedgerStore = Depends(get_ledger),
    viewer_for: ViewerResolver = Depends(get_viewer_resolver),
    clock: SystemClock = Depends(get_clock),
    config: MonetizationConfig = Depends(get_monetization_config),
) -> dict[str, Any]:
    req = req or FanIdentityRequest()
    creator = get_creator(username, repo=ledger)
    result = run_unlock(
        UnlockInput(
            creator=creator,
            viewer=viewer_for(req.fan_username, req.fan_email),
            post_id=post_id,
        ),
        ledger=ledger,
        time=clock,
        config=config,
    )
    if result.already_unlocked:
        return {"success": True, "alreadyUnlocked": True, "unlockedPostId": result.unlocked_post_id}
    return {
        "success": True,
        "unlockedPostId": result.unlocked_post_id,
        "transaction": _dump(result.transaction),
    }


@router.post("/{username}/subscribe")
def subscribe(
    username: str,
    req: FanIdentityRequest | None = None,
    ledger: LedgerStore = Depends(get_ledger),
    viewer_for: ViewerResolver = Depends(get_viewer_resolver),
    clock: SystemClock = Depends(get_clock),
    config: MonetizationConfig = Depends(get_monetization_config),
) -> dict[str, Any]:
    req = req or FanIdentityRequest()
    creator = get_creator(username, repo=ledger)
    result = run_subscribe(
        SubscribeInput(creator=creator, viewer=viewer_for(req.fan_username, req.fan_email)),
        ledger=ledger,
        time=clock,
        config=config,
    )
    if result.already_subscribed:
        return {
            "success": True,
            "alreadySubscribed": True,
            "subscription": _dump(result.subscription),
        }
    return {
        "success": True,
        "subscription": _dump(result.subscription),
        "transaction": _dump(result.transaction),
    }


@router.post("/{username}/posts/{post_id}/like")
def like_post(
    username: str,
    post_id: int,
    req: LikeRequest | None = None,
    ledger: LedgerStore = Depends(get_ledger),
    viewer_for: ViewerResolver = Depends(get_viewer_resolver),
) -> dict[str, Any]:
    req = req or LikeRequest()
    creator = get_creator(username, repo=ledger)
    result = run_like(
        LikeInput(creator=creator, viewer=viewer_for(req.fan_username), post_id=post_id),
        ledger=ledger,
    )
    return {
        "success": True,
        "postId": result.post_id,
        "likes": result.likes,
        "likedByMe": result.liked_by_me,
    }


@router.get("/{username}/earnings")
def earnings(username: str, ledger: LedgerStore = Depends(get_ledger)) -> dict[str, Any]:
    creator = get_creator(username, repo=ledger)
    return run_earnings(creator, source=ledger).to_dict()
