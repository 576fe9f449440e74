"""
Ledger store - indexed repositories over the in-memory ledger.

One LedgerStore is constructed at process start. Every mutation runs under
a single re-entrant lock so the idempotency checks for unlocks and
subscriptions and the append that follows them are atomic. Reads take the
same lock and hand back copies, so a reader sees an append either fully or
not at all.

Invariants:
- ids are monotonically increasing per collection
- usernames are unique case-insensitively, emails exactly
- at most one UnlockRecord per canonical (creator, fan, post)
- at most one active Subscription per canonical (creator, fan) at append time
- transactions and subscriptions are never updated or removed
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from src.domain.entities import (
    CreatorProfile,
    Message,
    Post,
    Subscription,
    Transaction,
    UnlockRecord,
    User,
    canonical_username,
)
from src.domain.errors import ConflictError, NotFoundError

from .models import LedgerState, SubscriptionAppendResult, UnlockAppendResult

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

KeyFunc = Callable[[Any], str]


class Repository(Generic[T]):
    """
    Insertion-ordered map keyed by integer id with optional unique indexes.

    Not thread-safe on its own; LedgerStore serialises access.
    """

    def __init__(self, unique: dict[str, KeyFunc] | None = None) -> None:
        self._items: dict[int, T] = {}
        self._key_funcs: dict[str, KeyFunc] = unique or {}
        self._indexes: dict[str, dict[str, int]] = {name: {} for name in self._key_funcs}
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def last_id(self) -> int:
        return self._last_id

    def next_id(self) -> int:
        return self._last_id + 1

    def reserve(self, item_id: int) -> None:
        """Never issue ids at or below ``item_id``."""
        self._last_id = max(self._last_id, item_id)

    def _check_unique(self, item: T, ignore_id: int | None = None) -> None:
        for name, key_func in self._key_funcs.items():
            key = key_func(item)
            existing = self._indexes[name].get(key)
            if existing is not None and existing != ignore_id:
                raise ConflictError(f"Duplicate {name}: {key}", field=name)

    def add(self, item: T) -> T:
        item_id = item.id  # type: ignore[attr-defined]
        if item_id in self._items:
            raise ConflictError(f"Duplicate id: {item_id}", field="id")
        self._check_unique(item)
        self._items[item_id] = item
        for name, key_func in self._key_funcs.items():
            self._indexes[name][key_func(item)] = item_id
        self._last_id = max(self._last_id, item_id)
        return item

    def replace(self, item: T) -> T:
        item_id = item.id  # type: ignore[attr-defined]
        old = self._items.get(item_id)
        if old is None:
            raise NotFoundError(f"Unknown id: {item_id}")
        self._check_unique(item, ignore_id=item_id)
        for name, key_func in self._key_funcs.items():
            self._indexes[name].pop(key_func(old), None)
            self._indexes[name][key_func(item)] = item_id
        self._items[item_id] = item
        return item

    def remove(self, item_id: int) -> T | None:
        item = self._items.pop(item_id, None)
        if item is not None:
            for name, key_func in self._key_funcs.items():
                self._indexes[name].pop(key_func(item), None)
        return item

    def get(self, item_id: int) -> T | None:
        return self._items.get(item_id)

    def find(self, index: str, key: str) -> T | None:
        item_id = self._indexes[index].get(key)
        return self._items.get(item_id) if item_id is not None else None

    def values(self) -> list[T]:
        return list(self._items.values())


def _email_key(item: Any) -> str:
    return str(item.email).strip().lower()


def _username_key(item: Any) -> str:
    return canonical_username(item.username)


def normalize_post(post: Post) -> Post:
    """Canonicalise ``liked_by`` (deduplicated, order kept) and derive ``likes``."""
    seen: list[str] = []
    for name in post.liked_by:
        key = canonical_username(name)
        if key and key not in seen:
            seen.append(key)
    return post.model_copy(update={"liked_by": seen, "likes": len(seen)})


def _copy(item: T) -> T:
    return item.model_copy(deep=True)


class LedgerStore:
    """The ledger and entity repositories, guarded by one lock."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._listeners: list[Callable[[], None]] = []
        self._reset()

    def _reset(self) -> None:
        self.users: Repository[User] = Repository(
            unique={"email": _email_key, "username": _username_key}
        )
        self.creators: Repository[CreatorProfile] = Repository(
            unique={"email": _email_key, "username": _username_key}
        )
        self.posts: Repository[Post] = Repository()
        self.transactions: Repository[Transaction] = Repository()
        self.subscriptions: Repository[Subscription] = Repository()
        self.messages: Repository[Message] = Repository()
        self._unlocks: dict[tuple[str, str, int], UnlockRecord] = {}

    def _repositories(self) -> dict[str, Repository[Any]]:
        return {
            "users": self.users,
            "creators": self.creators,
            "posts": self.posts,
            "transactions": self.transactions,
            "subscriptions": self.subscriptions,
            "messages": self.messages,
        }

    # --- Change notification ---

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Register a callable invoked after every committed mutation."""
        self._listeners.append(listener)

    @contextmanager
    def mutation(self) -> Iterator[None]:
        """Hold the store lock for a mutation and notify listeners afterwards."""
        with self._lock:
            yield
        for listener in self._listeners:
            listener()

    @contextmanager
    def reading(self) -> Iterator[None]:
        with self._lock:
            yield

    # --- Snapshot boundary ---

    def to_state(self) -> LedgerState:
        with self._lock:
            return LedgerState(
                users=[_copy(u) for u in self.users.values()],
                creators=[_copy(c) for c in self.creators.values()],
                posts=[_copy(p) for p in self.posts.values()],
                transactions=[_copy(t) for t in self.transactions.values()],
                subscriptions=[_copy(s) for s in self.subscriptions.values()],
                unlocked_posts=[_copy(u) for u in self._unlocks.values()],
                messages=[_copy(m) for m in self.messages.values()],
                last_ids={name: repo.last_id for name, repo in self._repositories().items()},
            )

    def load_state(self, state: LedgerState) -> None:
        """Replace the whole ledger with ``state``, normalising records once."""
        with self._lock:
            self._reset()
            for user in state.users:
                self.users.add(user)
            for creator in state.creators:
                self.creators.add(creator)
            for post in state.posts:
                self.posts.add(normalize_post(post))
            for txn in state.transactions:
                self.transactions.add(txn)
            for sub in state.subscriptions:
                self.subscriptions.add(sub)
            for record in state.unlocked_posts:
                self._unlocks.setdefault(record.key, record)
            for message in state.messages:
                self.messages.add(message)
            repositories = self._repositories()
            for name, last_id in state.last_ids.items():
                if name in repositories:
                    repositories[name].reserve(last_id)
            # Transactions and unlocks outlive their posts.
            for txn in state.transactions:
                if txn.post_id is not None:
                    self.posts.reserve(txn.post_id)
            for record in self._unlocks.values():
                self.posts.reserve(record.post_id)
        logger.info(
            "Ledger loaded: %d users, %d creators, %d posts, %d transactions",
            len(self.users),
            len(self.creators),
            len(self.posts),
            len(self.transactions),
        )

    # --- Users ---

    def add_user(self, user: User) -> User:
        with self.mutation():
            return _copy(self.users.add(user.model_copy(update={"id": self.users.next_id()})))

    def replace_user(self, user: User) -> User:
        with self.mutation():
            return _copy(self.users.replace(user))

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            user = self.users.get(user_id)
            return _copy(user) if user else None

    def find_user_by_email(self, email: str) -> User | None:
        with self._lock:
            user = self.users.find("email", email.strip().lower())
            return _copy(user) if user else None

    def find_user_by_username(self, username: str) -> User | None:
        with self._lock:
            user = self.users.find("username", canonical_username(username))
            return _copy(user) if user else None

    def find_user_by_verification_token(self, token: str) -> User | None:
        with self._lock:
            for user in self.users.values():
                if user.verification_token and user.verification_token == token:
                    return _copy(user)
            return None

    # --- Creators ---

    def add_creator(self, creator: CreatorProfile) -> CreatorProfile:
        """Insert a creator and upgrade the user with the same email to ``creator``."""
        with self.mutation():
            stored = self.creators.add(
                creator.model_copy(update={"id": self.creators.next_id()})
            )
            owner = self.users.find("email", _email_key(stored))
            if owner is not None and owner.role != "creator":
                self.users.replace(owner.model_copy(update={"role": "creator"}))
            return _copy(stored)

    def replace_creator(self, creator: CreatorProfile) -> CreatorProfile:
        with self.mutation():
            return _copy(self.creators.replace(creator))

    def find_creator(self, username: str) -> CreatorProfile | None:
        with self._lock:
            creator = self.creators.find("username", canonical_username(username))
            return _copy(creator) if creator else None

    def list_creators(self) -> list[CreatorProfile]:
        with self._lock:
            return [_copy(c) for c in self.creators.values()]

    # --- Posts ---

    def add_post(self, post: Post) -> Post:
        with self.mutation():
            stored = self.posts.add(
                normalize_post(post).model_copy(update={"id": self.posts.next_id()})
            )
            return _copy(stored)

    def replace_post(self, post: Post) -> Post:
        with self.mutation():
            return _copy(self.posts.replace(normalize_post(post)))

    def find_post(self, creator_username: str, post_id: int) -> Post | None:
        with self._lock:
            post = self.posts.get(post_id)
            if post is None or canonical_username(post.username) != canonical_username(
                creator_username
            ):
                return None
            return _copy(post)

    def creator_posts(self, creator_username: str) -> list[Post]:
        key = canonical_username(creator_username)
        with self._lock:
            return [_copy(p) for p in self.posts.values() if canonical_username(p.username) == key]

    def delete_post(self, creator_username: str, post_id: int) -> int:
        """Remove a post and its unlock records. Returns the number of records removed."""
        creator_key = canonical_username(creator_username)
        with self.mutation():
            if self.find_post(creator_username, post_id) is None:
                raise NotFoundError("Post not found")
            self.posts.remove(post_id)
            stale = [k for k in self._unlocks if k[0] == creator_key and k[2] == post_id]
            for key in stale:
                del self._unlocks[key]
            return len(stale)

    def toggle_like(self, creator_username: str, post_id: int, fan_username: str) -> tuple[Post, bool]:
        """Flip the fan's membership in ``liked_by``. Returns the post and the new state."""
        fan_key = canonical_username(fan_username)
        with self.mutation():
            post = self.posts.get(post_id)
            if post is None or canonical_username(post.username) != canonical_username(
                creator_username
            ):
                raise NotFoundError("Post not found")
            liked_by = list(post.liked_by)
            if fan_key in liked_by:
                liked_by.remove(fan_key)
                liked = False
            else:
                liked_by.append(fan_key)
                liked = True
            stored = self.posts.replace(
                post.model_copy(update={"liked_by": liked_by, "likes": len(liked_by)})
            )
            return _copy(stored), liked

    # --- Ledger reads ---

    def subscriptions_for(self, creator_username: str, fan_username: str | None = None) -> list[Subscription]:
        creator_key = canonical_username(creator_username)
        fan_key = canonical_username(fan_username) if fan_username is not None else None
        with self._lock:
            return [
                _copy(s)
                for s in self.subscriptions.values()
                if canonical_username(s.creator_username) == creator_key
                and (fan_key is None or canonical_username(s.fan_username) == fan_key)
            ]

    def active_subscription(self, creator_username: str, fan_username: str, now: datetime) -> Subscription | None:
        for sub in self.subscriptions_for(creator_username, fan_username):
            if sub.is_active(now):
                return sub
        return None

    def unlocks_for(self, creator_username: str, fan_username: str | None = None) -> list[UnlockRecord]:
        creator_key = canonical_username(creator_username)
        fan_key = canonical_username(fan_username) if fan_username is not None else None
        with self._lock:
            return [
                _copy(record)
                for key, record in self._unlocks.items()
                if key[0] == creator_key and (fan_key is None or key[1] == fan_key)
            ]

    def has_unlock(self, creator_username: str, fan_username: str, post_id: int) -> bool:
        key = (canonical_username(creator_username), canonical_username(fan_username), post_id)
        with self._lock:
            return key in self._unlocks

    def transactions_for(self, creator_username: str) -> list[Transaction]:
        creator_key = canonical_username(creator_username)
        with self._lock:
            return [
                _copy(t)
                for t in self.transactions.values()
                if canonical_username(t.creator_username) == creator_key
            ]

    def all_transactions(self) -> list[Transaction]:
        with self._lock:
            return [_copy(t) for t in self.transactions.values()]

    # --- Ledger appends ---

    def _append_transaction(self, **fields: Any) -> Transaction:
        txn = Transaction(id=self.transactions.next_id(), **fields)
        self.transactions.add(txn)
        logger.info(
            "Transaction %d appended: %s %s -> %s %.2f",
            txn.id,
            txn.type,
            txn.fan_username,
            txn.creator_username,
            txn.amount,
        )
        return txn

    def append_transaction(self, **fields: Any) -> Transaction:
        """Append a transaction unconditionally (tips)."""
        with self.mutation():
            return _copy(self._append_transaction(**fields))

    def add_unlock_if_absent(
        self,
        creator_username: str,
        fan_username: str,
        post_id: int,
        now: datetime,
        **txn_fields: Any,
    ) -> UnlockAppendResult:
        """
        Append an UnlockRecord and its ``ppv_unlock`` transaction exactly once.

        A repeat for the same canonical key returns the existing record and
        appends nothing.
        """
        key = (canonical_username(creator_username), canonical_username(fan_username), post_id)
        with self.mutation():
            existing = self._unlocks.get(key)
            if existing is not None:
                return UnlockAppendResult(record=_copy(existing), transaction=None, created=False)

            txn = self._append_transaction(
                type="ppv_unlock",
                creator_username=creator_username,
                fan_username=fan_username,
                post_id=post_id,
                created_at=now,
                **txn_fields,
            )
            record = UnlockRecord(
                creator_username=creator_username,
                fan_username=fan_username,
                post_id=post_id,
                created_at=now,
            )
            self._unlocks[key] = record
            return UnlockAppendResult(record=_copy(record), transaction=_copy(txn), created=True)

    def add_subscription_if_no_active(
        self,
        creator_username: str,
        fan_username: str,
        price: float,
        now: datetime,
        duration: timedelta,
        fan_email: str | None = None,
        currency: str = "USD",
    ) -> SubscriptionAppendResult:
        """
        Append a Subscription and its transaction unless one is active.

        Expired rows are kept; a new row never extends an old one.
        """
        with self.mutation():
            existing = self.active_subscription(creator_username, fan_username, now)
            if existing is not None:
                return SubscriptionAppendResult(subscription=existing, transaction=None, created=False)

            subscription = Subscription(
                id=self.subscriptions.next_id(),
                creator_username=creator_username,
                fan_username=fan_username,
                fan_email=fan_email,
                price=price,
                currency=currency,
                status="active",
                created_at=now,
                expires_at=now + duration,
            )
            self.subscriptions.add(subscription)
            txn = self._append_transaction(
                type="subscription",
                creator_username=creator_username,
                fan_username=fan_username,
                fan_email=fan_email,
                amount=price,
                currency=currency,
                post_id=None,
                created_at=now,
            )
            return SubscriptionAppendResult(
                subscription=_copy(subscription), transaction=_copy(txn), created=True
            )
