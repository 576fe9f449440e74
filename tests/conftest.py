import pytest
from fastapi.testclient import TestClient

from src.adapters.clock import FixedClock
from src.adapters.fs.uploads import UploadStore
from src.api.deps import get_clock, get_ledger, get_rules, get_upload_store
from src.api.main import app
from src.components.ledger import LedgerStore
from src.rules.models import Rules


@pytest.fixture
def ledger() -> LedgerStore:
    """A fresh, empty ledger per test."""
    return LedgerStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def upload_store(tmp_path) -> UploadStore:
    return UploadStore(tmp_path / "uploads")


@pytest.fixture
def client(ledger, clock, upload_store):
    """
    TestClient wired to in-test ledger, clock and upload store.

    The lifespan is not entered, so no snapshot file is read or written.
    """
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_upload_store] = lambda: upload_store
    app.dependency_overrides[get_rules] = lambda: Rules()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_creator(client):
    """Create a creator through the API and return its username."""

    def _make(
        username: str = "alice",
        account_type: str = "subscription",
        price: str | None = "5",
        email: str | None = None,
    ) -> str:
        data = {
            "displayName": username.title(),
            "username": username,
            "email": email or f"{username}@example.com",
            "accountType": account_type,
        }
        if price is not None:
            data["price"] = price
        resp = client.post("/api/creators", data=data)
        assert resp.status_code == 200, resp.text
        return username

    return _make


@pytest.fixture
def make_post(client):
    def _make(creator: str = "alice", visibility: str = "ppv", price: str | None = "3", **extra) -> dict:
        data = {"title": extra.pop("title", "Hello"), "visibility": visibility, **extra}
        if price is not None:
            data["price"] = price
        resp = client.post(f"/api/creators/{creator}/posts", data=data)
        assert resp.status_code == 200, resp.text
        return resp.json()["post"]

    return _make


@pytest.fixture
def login(client):
    """Sign up, verify and log in a user; returns the bearer header."""

    def _login(email: str, username: str, password: str = "secret1") -> dict[str, str]:
        resp = client.post(
            "/api/auth/signup", json={"email": email, "username": username, "password": password}
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["verificationToken"]
        assert client.get("/api/auth/verify-email", params={"token": token}).status_code == 200
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login
