import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.fs.uploads import UploadStore
from src.adapters.json_snapshot import JsonSnapshotStore
from src.adapters.snapshot_writer import SnapshotWriter
from src.components import accounts, monetization
from src.components.identity import ViewerIdentity, require_authenticated, resolve
from src.components.ledger import LedgerStore, open_ledger
from src.domain.entities import User
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("FANIKO_DATA_DIR", "./data"))
        self.secret_key = os.environ.get("FANIKO_SECRET_KEY", "dev-secret-unsafe")
        self.rules_path = Path(
            os.environ.get("FANIKO_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_monetization_config(rules: Rules = Depends(get_rules)) -> monetization.MonetizationConfig:
    return monetization.load_config_from_rules(rules)


def get_accounts_config(rules: Rules = Depends(get_rules)) -> accounts.AccountsConfig:
    return accounts.load_config_from_rules(rules)


# --- Ledger (process-wide) ---
_ledger_instance: LedgerStore | None = None
_writer_instance: SnapshotWriter | None = None


def init_ledger(settings: Settings, rules: Rules) -> LedgerStore:
    """Load the ledger from its snapshot and attach the snapshot writer."""
    global _ledger_instance, _writer_instance
    if _ledger_instance is not None:
        return _ledger_instance

    snapshot_store = JsonSnapshotStore(settings.data_dir / rules.storage.snapshot_file)
    store = open_ledger(snapshot_store)
    writer = SnapshotWriter(store, snapshot_store, background=rules.storage.write_behind)
    store.add_listener(writer.notify)
    writer.start()

    _ledger_instance = store
    _writer_instance = writer
    logger.info("Ledger ready (snapshot: %s)", snapshot_store.path)
    return store


def shutdown_ledger() -> None:
    global _ledger_instance, _writer_instance
    if _writer_instance is not None:
        _writer_instance.stop()
    _ledger_instance = None
    _writer_instance = None


def get_ledger(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> LedgerStore:
    if _ledger_instance is None:
        return init_ledger(settings, rules)
    return _ledger_instance


# --- Adapters ---
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


def get_auth_adapter(settings: Settings = Depends(get_settings)) -> JWTAuthAdapter:
    return JWTAuthAdapter(settings.secret_key)


def get_upload_store(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> UploadStore:
    return UploadStore(settings.data_dir / rules.storage.uploads_dir)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_auth_token(token: Annotated[str | None, Depends(oauth2_scheme)]) -> str | None:
    return token or None


def get_current_user(
    token: Annotated[str | None, Depends(get_auth_token)],
    ledger: LedgerStore = Depends(get_ledger),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
) -> User:
    """Strict auth: raises AuthError (401) without a valid token."""
    return require_authenticated(token, verifier=auth, users=ledger)


class ViewerResolver:
    """Resolves a ViewerIdentity once the route has read its claimed fields."""

    def __init__(self, token: str | None, ledger: LedgerStore, auth: JWTAuthAdapter) -> None:
        self._token = token
        self._ledger = ledger
        self._auth = auth

    def __call__(
        self, claimed_username: str | None = None, claimed_email: str | None = None
    ) -> ViewerIdentity:
        return resolve(
            self._token,
            claimed_username,
            claimed_email,
            verifier=self._auth,
            users=self._ledger,
        )


def get_viewer_resolver(
    token: Annotated[str | None, Depends(get_auth_token)],
    ledger: LedgerStore = Depends(get_ledger),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
) -> ViewerResolver:
    """Optional auth: an invalid token silently degrades to the claimed fields."""
    return ViewerResolver(token, ledger, auth)
