"""
Accounts component - fans and creator profiles.

Signup, login and email verification for users; onboarding, listing and
updates for creator profiles. Creating a creator profile upgrades the user
with the same email to the ``creator`` role.
"""

from __future__ import annotations

import logging
import re
import secrets

from src.domain.entities import CreatorProfile, User, canonical_username, coerce_price
from src.domain.errors import AuthError, ConflictError, NotFoundError, ValidationError
from src.rules.models import Rules

from .models import (
    AccountsConfig,
    CreateCreatorInput,
    CreatorOutput,
    LoginInput,
    LoginOutput,
    SignupInput,
    SignupOutput,
    UpdateCreatorInput,
)
from .ports import AccountsRepoPort, AuthAdapterPort, UploadStorePort

logger = logging.getLogger(__name__)

ACCOUNT_TYPES = ("free", "subscription")
VERIFICATION_FILES = ("idFront", "idBack", "selfie")


def _clean(value: object) -> str:
    return str(value or "").strip()


# --- Users ---


def run_signup(
    inp: SignupInput,
    *,
    repo: AccountsRepoPort,
    auth: AuthAdapterPort,
    config: AccountsConfig | None = None,
) -> SignupOutput:
    """
    Register a fan account with an unverified email.

    Raises:
        ValidationError: missing or malformed fields
        ConflictError: email or username already registered
    """
    config = config or AccountsConfig()
    email = _clean(inp.email).lower()
    username = canonical_username(inp.username)
    password = _clean(inp.password)

    if not email or not username or not password:
        raise ValidationError("Missing email, username, or password.")
    if not re.search(config.email_pattern, email):
        raise ValidationError("Please provide a valid email address.")
    if not re.match(config.username_pattern, username):
        raise ValidationError(
            "Username can only contain lowercase letters, numbers, and underscores."
        )
    if len(password) < config.password_min_length:
        raise ValidationError(
            f"Password must be at least {config.password_min_length} characters long."
        )

    if repo.find_user_by_email(email):
        raise ConflictError("That email is already in use. Try logging in instead.", field="email")
    if repo.find_user_by_username(username):
        raise ConflictError(
            "That username is already taken. Please choose another.", field="username"
        )

    token = secrets.token_hex(32)
    user = repo.add_user(
        User(
            id=0,
            email=email,
            username=username,
            password_hash=auth.hash_password(password),
            role="fan",
            email_verified=False,
            verification_token=token,
        )
    )
    logger.info("User %d signed up as %s", user.id, user.username)
    return SignupOutput(user=user, verification_token=token)


def run_login(
    inp: LoginInput,
    *,
    repo: AccountsRepoPort,
    auth: AuthAdapterPort,
    config: AccountsConfig | None = None,
) -> LoginOutput:
    """Exchange credentials for a signed token. Unverified emails cannot log in."""
    config = config or AccountsConfig()
    email = _clean(inp.email).lower()
    password = _clean(inp.password)
    if not email or not password:
        raise ValidationError("Missing email or password.")

    user = repo.find_user_by_email(email)
    if user is None or not auth.verify_password(password, user.password_hash):
        raise AuthError("Invalid email or password.")
    if not user.email_verified:
        raise AuthError("Email not verified. Please verify your email.")

    token = auth.create_token(user.id, config.token_ttl_minutes)
    return LoginOutput(user=user, token=token)


def run_verify_email(token: str | None, *, repo: AccountsRepoPort) -> User:
    """Mark the email behind ``token`` as verified. Verification is one-way."""
    if not token:
        raise ValidationError("Missing verification token.")
    user = repo.find_user_by_verification_token(token)
    if user is None:
        raise ValidationError("Invalid verification token.")
    verified = repo.replace_user(
        user.model_copy(update={"email_verified": True, "verification_token": None})
    )
    logger.info("User %d verified email", verified.id)
    return verified


# --- Creators ---


def run_create_creator(
    inp: CreateCreatorInput,
    *,
    repo: AccountsRepoPort,
    files: UploadStorePort | None = None,
) -> CreatorOutput:
    """
    Create a pending creator profile.

    Verification files (``idFront``, ``idBack``, ``selfie``) are stored in
    the blob store and referenced by handle.
    """
    display_name = _clean(inp.display_name)
    username = canonical_username(inp.username)
    email = _clean(inp.email).lower()
    account_type = _clean(inp.account_type)

    if not display_name or not username or not email or not account_type:
        raise ValidationError("Missing required fields")
    if account_type not in ACCOUNT_TYPES:
        raise ValidationError("Invalid account type")

    if repo.find_creator(username):
        raise ConflictError("That creator username is already taken.", field="username")
    if any(c.email.lower() == email for c in repo.list_creators()):
        raise ConflictError(
            "This email is already linked to a creator account. Try logging in instead.",
            field="email",
        )

    handles: dict[str, str | None] = {name: None for name in VERIFICATION_FILES}
    if files is not None:
        for name in VERIFICATION_FILES:
            upload = inp.uploads.get(name)
            if upload is not None:
                handles[name] = files.put(name, upload.filename, upload.data)

    creator = repo.add_creator(
        CreatorProfile(
            id=0,
            display_name=display_name,
            username=username,
            email=email,
            account_type=account_type,  # type: ignore[arg-type]
            price=coerce_price(inp.price) if account_type == "subscription" else None,
            id_front_path=handles["idFront"],
            id_back_path=handles["idBack"],
            selfie_path=handles["selfie"],
            status="pending",
        )
    )
    logger.info("Creator %d created: %s (%s)", creator.id, creator.username, creator.account_type)
    return CreatorOutput(creator=creator)


def get_creator(username: str, *, repo: AccountsRepoPort) -> CreatorProfile:
    creator = repo.find_creator(username)
    if creator is None:
        raise NotFoundError("Creator not found")
    return creator


def list_creators(*, repo: AccountsRepoPort) -> list[CreatorProfile]:
    return repo.list_creators()


def run_update_creator(inp: UpdateCreatorInput, *, repo: AccountsRepoPort) -> CreatorOutput:
    """
    Update display name, account type or price.

    Switching to ``subscription`` keeps the previous price when the new one
    does not parse; switching to ``free`` clears the price. A price alone is
    applied only to subscription accounts.
    """
    creator = get_creator(inp.username, repo=repo)
    updates: dict[str, object] = {}

    if inp.display_name is not None:
        clean_name = _clean(inp.display_name)
        if clean_name:
            updates["display_name"] = clean_name

    if inp.account_type is not None:
        if inp.account_type not in ACCOUNT_TYPES:
            raise ValidationError("Invalid account type")
        updates["account_type"] = inp.account_type
        if inp.account_type == "subscription":
            updates["price"] = coerce_price(inp.price, fallback=creator.price or 0.0)
        else:
            updates["price"] = None
    elif inp.price is not None and creator.account_type == "subscription":
        updates["price"] = coerce_price(inp.price)

    updated = repo.replace_creator(creator.model_copy(update=updates))
    return CreatorOutput(creator=updated)


# --- Configuration Loader ---


def load_config_from_rules(rules: Rules) -> AccountsConfig:
    section = rules.accounts
    return AccountsConfig(
        password_min_length=section.password_min_length,
        username_pattern=section.username_pattern,
        email_pattern=section.email_pattern,
        token_ttl_minutes=section.token_ttl_minutes,
    )
