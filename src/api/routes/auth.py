from typing import Any

from fastapi import APIRouter, Depends

from src.adapters.auth.crypto import JWTAuthAdapter
from src.api.deps import get_accounts_config, get_auth_adapter, get_current_user, get_ledger
from src.api.schemas import LoginRequest, SignupRequest
from src.components.accounts import (
    AccountsConfig,
    LoginInput,
    SignupInput,
    run_login,
    run_signup,
    run_verify_email,
)
from src.components.ledger import LedgerStore
from src.domain.entities import User

router = APIRouter()


def _public_user(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "role": user.role,
    }


@router.post("/signup")
def signup(
    req: SignupRequest,
    ledger: LedgerStore = Depends(get_ledger),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    config: AccountsConfig = Depends(get_accounts_config),
) -> dict[str, Any]:
    """Register a fan. The verification token is returned for the email step."""
    result = run_signup(
        SignupInput(email=req.email, username=req.username, password=req.password),
        repo=ledger,
        auth=auth,
        config=config,
    )
    return {
        **_public_user(result.user),
        "message": (
            "Signup successful. Please verify your email by visiting "
            "/api/auth/verify-email?token=<token> with the token provided."
        ),
        "verificationToken": result.verification_token,
    }


@router.post("/login")
def login(
    req: LoginRequest,
    ledger: LedgerStore = Depends(get_ledger),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    config: AccountsConfig = Depends(get_accounts_config),
) -> dict[str, Any]:
    """Authenticate and return a bearer token."""
    result = run_login(
        LoginInput(email=req.email, password=req.password),
        repo=ledger,
        auth=auth,
        config=config,
    )
    return {**_public_user(result.user), "token": result.token}


@router.get("/verify-email")
def verify_email(
    token: str | None = None,
    ledger: LedgerStore = Depends(get_ledger),
) -> dict[str, Any]:
    run_verify_email(token, repo=ledger)
    return {"success": True, "message": "Email successfully verified."}


@router.get("/me")
def read_users_me(current_user: User = Depends(get_current_user)) -> dict[str, Any]:
    """Get current user info."""
    return {**_public_user(current_user), "emailVerified": current_user.email_verified}
