"""
Regression tests for the ledger's end-to-end properties.

Each test drives the operations through their component entry points with a
real LedgerStore and a fixed clock.
"""

from datetime import timedelta

import pytest

from src.adapters.clock import FixedClock
from src.components.accounts import CreateCreatorInput, get_creator, run_create_creator
from src.components.entitlement import ListPostsInput, list_creator_posts
from src.components.identity import GUEST, ViewerIdentity
from src.components.ledger import LedgerStore
from src.components.monetization import (
    LikeInput,
    SubscribeInput,
    TipInput,
    UnlockInput,
    run_like,
    run_subscribe,
    run_tip,
    run_unlock,
)
from src.components.posts import CreatePostInput, run_create
from src.components.revenue import run_earnings
from src.domain.entities import User


@pytest.fixture
def ledger():
    return LedgerStore()


@pytest.fixture
def clock():
    return FixedClock()


def creator(ledger, account_type="subscription", price="20", username="alice"):
    return run_create_creator(
        CreateCreatorInput(
            display_name="Alice",
            username=username,
            email=f"{username}@example.com",
            account_type=account_type,
            price=price,
        ),
        repo=ledger,
    ).creator


def post(ledger, owner, visibility="ppv", price="10"):
    return run_create(
        CreatePostInput(creator=owner, title="Post", visibility=visibility, price=price),
        repo=ledger,
    ).post


def listing(ledger, clock, owner, viewer):
    fan = viewer.fan_username
    return list_creator_posts(
        ListPostsInput(
            viewer=viewer,
            creator=owner,
            posts=ledger.creator_posts(owner.username),
            subscriptions=ledger.subscriptions_for(owner.username, fan) if fan else [],
            unlocks=ledger.unlocks_for(owner.username, fan) if fan else [],
            now=clock.now_utc(),
        )
    )


FAN = ViewerIdentity(kind="anonymous", claimed_username="fan")


def test_free_post_on_free_creator_is_open_to_everyone(ledger, clock):
    owner = creator(ledger, "free", None)
    post(ledger, owner, "free", None)
    for viewer in (GUEST, FAN):
        assert listing(ledger, clock, owner, viewer)[0]["locked"] is False


def test_ppv_without_unlock_is_locked_even_when_subscribed(ledger, clock):
    owner = creator(ledger)
    post(ledger, owner)
    run_subscribe(SubscribeInput(creator=owner, viewer=FAN), ledger=ledger, time=clock)
    assert listing(ledger, clock, owner, FAN)[0]["locked"] is True


def test_owner_sees_own_posts_unlocked(ledger, clock):
    owner = creator(ledger)
    post(ledger, owner)
    post(ledger, owner, "free", None)
    me = ViewerIdentity(
        kind="authenticated",
        user=User(id=1, email="alice@example.com", username="alice", password_hash="x", role="creator"),
    )
    assert all(not p["locked"] for p in listing(ledger, clock, owner, me))


def test_unlock_twice_records_once(ledger, clock):
    owner = creator(ledger, "free", None)
    p = post(ledger, owner)
    first = run_unlock(UnlockInput(creator=owner, viewer=FAN, post_id=p.id), ledger=ledger, time=clock)
    second = run_unlock(UnlockInput(creator=owner, viewer=FAN, post_id=p.id), ledger=ledger, time=clock)

    assert not first.already_unlocked
    assert second.already_unlocked
    assert len(ledger.unlocks_for("alice", "fan")) == 1
    assert [t.type for t in ledger.transactions_for("alice")] == ["ppv_unlock"]


def test_subscribe_twice_while_active_records_once(ledger, clock):
    owner = creator(ledger)
    run_subscribe(SubscribeInput(creator=owner, viewer=FAN), ledger=ledger, time=clock)
    again = run_subscribe(SubscribeInput(creator=owner, viewer=FAN), ledger=ledger, time=clock)

    assert again.already_subscribed
    assert len(ledger.subscriptions_for("alice", "fan")) == 1
    assert len(ledger.transactions_for("alice")) == 1


def test_expired_subscription_fails_gate_and_resubscribe_adds_row(ledger, clock):
    owner = creator(ledger)
    p = post(ledger, owner)
    run_subscribe(SubscribeInput(creator=owner, viewer=FAN), ledger=ledger, time=clock)
    run_unlock(UnlockInput(creator=owner, viewer=FAN, post_id=p.id), ledger=ledger, time=clock)
    assert listing(ledger, clock, owner, FAN)[0]["locked"] is False

    clock.advance(days=30, seconds=1)
    assert listing(ledger, clock, owner, FAN)[0]["locked"] is True

    renewed = run_subscribe(SubscribeInput(creator=owner, viewer=FAN), ledger=ledger, time=clock)
    assert not renewed.already_subscribed
    assert len(ledger.subscriptions_for("alice", "fan")) == 2
    assert renewed.subscription.expires_at == clock.now_utc() + timedelta(days=30)
    assert listing(ledger, clock, owner, FAN)[0]["locked"] is False


def test_like_then_unlike_restores_count(ledger):
    owner = creator(ledger, "free", None)
    p = post(ledger, owner, "free", None)
    run_like(LikeInput(creator=owner, viewer=FAN, post_id=p.id), ledger=ledger)
    out = run_like(LikeInput(creator=owner, viewer=FAN, post_id=p.id), ledger=ledger)
    assert out.likes == p.likes
    assert out.liked_by_me is False


def test_earnings_totals(ledger, clock):
    owner = creator(ledger, "subscription", "20")
    p = post(ledger, owner, "ppv", "10")
    run_tip(TipInput(creator=owner, viewer=FAN, amount=5), ledger=ledger, time=clock)
    run_unlock(UnlockInput(creator=owner, viewer=FAN, post_id=p.id), ledger=ledger, time=clock)
    run_subscribe(SubscribeInput(creator=owner, viewer=FAN), ledger=ledger, time=clock)

    totals = run_earnings(owner, source=ledger).totals
    assert (totals.tips, totals.ppv, totals.subscriptions, totals.all_time) == (5, 10, 20, 35)


def test_creator_lookup_is_case_insensitive(ledger, clock):
    owner = creator(ledger)
    post(ledger, owner)
    assert get_creator("ALICE", repo=ledger) == get_creator(" alice ", repo=ledger)
    assert listing(ledger, clock, get_creator("Alice", repo=ledger), FAN) == listing(
        ledger, clock, owner, FAN
    )
