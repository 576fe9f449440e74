"""
Unit tests for identity resolution.
"""

from __future__ import annotations

import pytest

from src.components.identity import (
    GUEST,
    ViewerIdentity,
    authenticate,
    require_authenticated,
    require_fan,
    resolve,
)
from src.domain.entities import User
from src.domain.errors import AuthError, ValidationError

# --- Fakes ---


class FakeVerifier:
    """Accepts tokens of the form ``ok-<id>``."""

    def validate_token(self, token: str) -> int | None:
        if token.startswith("ok-"):
            return int(token[3:])
        return None


class FakeUsers:
    def __init__(self, *users: User) -> None:
        self._users = {u.id: u for u in users}

    def get_user(self, user_id: int) -> User | None:
        return self._users.get(user_id)


ALICE = User(id=1, email="alice@example.com", username="alice", password_hash="x", role="creator")
BOB = User(id=2, email="bob@example.com", username="bob", password_hash="x")


@pytest.fixture
def deps() -> dict:
    return {"verifier": FakeVerifier(), "users": FakeUsers(ALICE, BOB)}


class TestResolve:
    def test_token_wins_over_claims(self, deps: dict) -> None:
        viewer = resolve("ok-2", "mallory", "m@example.com", **deps)
        assert viewer.kind == "authenticated"
        assert viewer.fan_username == "bob"
        assert viewer.email == "bob@example.com"

    def test_invalid_token_falls_back_to_claims(self, deps: dict) -> None:
        viewer = resolve("bad", " Carol ", None, **deps)
        assert viewer.kind == "anonymous"
        assert viewer.fan_username == "carol"
        assert viewer.display_username == "Carol"

    def test_token_for_unknown_user_falls_back(self, deps: dict) -> None:
        assert resolve("ok-99", None, None, **deps) == GUEST

    def test_blank_claim_is_guest(self, deps: dict) -> None:
        viewer = resolve(None, "   ", None, **deps)
        assert viewer.kind == "guest"
        assert viewer.fan_username is None

    def test_guest_keeps_claimed_email(self, deps: dict) -> None:
        viewer = resolve(None, None, "x@example.com", **deps)
        assert viewer.kind == "guest"
        assert viewer.email == "x@example.com"


class TestIsCreator:
    def test_authenticated_creator_matches_case_insensitively(self) -> None:
        viewer = ViewerIdentity(kind="authenticated", user=ALICE)
        assert viewer.is_creator(" ALICE ")

    def test_claimed_username_is_never_the_creator(self) -> None:
        viewer = ViewerIdentity(kind="anonymous", claimed_username="alice")
        assert not viewer.is_creator("alice")

    def test_fan_role_is_not_the_creator(self) -> None:
        viewer = ViewerIdentity(kind="authenticated", user=BOB)
        assert not viewer.is_creator("bob")

    def test_authenticated_kind_without_user_uses_claims(self) -> None:
        viewer = ViewerIdentity(kind="authenticated", claimed_username=" Carol ", claimed_email="c@example.com")
        assert not viewer.is_authenticated
        assert viewer.fan_username == "carol"
        assert viewer.display_username == "Carol"
        assert viewer.email == "c@example.com"
        assert not viewer.is_creator("carol")


class TestRequire:
    def test_require_authenticated_missing(self, deps: dict) -> None:
        with pytest.raises(AuthError, match="Missing"):
            require_authenticated(None, **deps)

    def test_require_authenticated_invalid(self, deps: dict) -> None:
        with pytest.raises(AuthError, match="Invalid"):
            require_authenticated("nope", **deps)

    def test_require_authenticated_ok(self, deps: dict) -> None:
        assert require_authenticated("ok-1", **deps).username == "alice"

    def test_authenticate_without_token(self, deps: dict) -> None:
        assert authenticate(None, deps["verifier"], deps["users"]) is None

    def test_require_fan(self) -> None:
        with pytest.raises(ValidationError):
            require_fan(GUEST)
        assert require_fan(ViewerIdentity(kind="anonymous", claimed_username=" Dan ")) == "Dan"
