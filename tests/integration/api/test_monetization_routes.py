"""
Tips, PPV unlocks, subscriptions, likes and earnings over HTTP.
"""


def test_tip_and_earnings(client, make_creator):
    make_creator("alice")
    resp = client.post(
        "/api/creators/alice/tips",
        json={"amount": "2.50", "message": "thanks!", "fanUsername": "Fan"},
    )
    assert resp.status_code == 200
    txn = resp.json()["transaction"]
    assert txn["type"] == "tip"
    assert txn["fanUsername"] == "Fan"
    assert txn["amount"] == 2.5

    earnings = client.get("/api/creators/alice/earnings").json()
    assert earnings["totals"] == {"tips": 2.5, "ppv": 0.0, "subscriptions": 0.0, "allTime": 2.5}
    assert len(earnings["transactions"]) == 1


def test_tip_without_identity_is_anonymous(client, make_creator):
    make_creator("alice")
    resp = client.post("/api/creators/alice/tips", json={"amount": 1})
    assert resp.json()["transaction"]["fanUsername"] == "anonymous"


def test_invalid_tip_amount(client, make_creator):
    make_creator("alice")
    resp = client.post("/api/creators/alice/tips", json={"amount": "-3"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Please provide a valid tip amount."}


def test_tip_unknown_creator(client):
    assert client.post("/api/creators/ghost/tips", json={"amount": 1}).status_code == 404


def test_unlock_is_idempotent(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "ppv", "3")
    url = f"/api/creators/alice/posts/{post['id']}/unlock"

    first = client.post(url, json={"fanUsername": "fan"}).json()
    assert first["success"] is True
    assert first["unlockedPostId"] == post["id"]
    assert first["transaction"]["type"] == "ppv_unlock"

    again = client.post(url, json={"fanUsername": " FAN "}).json()
    assert again == {"success": True, "alreadyUnlocked": True, "unlockedPostId": post["id"]}

    assert client.get("/api/creators/alice/earnings").json()["totals"]["ppv"] == 3.0

    posts = client.get("/api/creators/alice/posts", params={"fanUsername": "Fan"}).json()
    assert posts[0]["locked"] is False


def test_unlock_needs_identity(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "ppv", "3")
    resp = client.post(f"/api/creators/alice/posts/{post['id']}/unlock")
    assert resp.status_code == 400
    assert "Missing fan identity" in resp.json()["error"]


def test_unlock_free_post_rejected(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "free", None)
    resp = client.post(f"/api/creators/alice/posts/{post['id']}/unlock", json={"fanUsername": "fan"})
    assert resp.status_code == 400


def test_unlock_unknown_post(client, make_creator):
    make_creator("alice")
    resp = client.post("/api/creators/alice/posts/77/unlock", json={"fanUsername": "fan"})
    assert resp.status_code == 404


def test_subscription_lifecycle(client, clock, make_creator, make_post):
    make_creator("alice", price="5")
    make_post("alice", "ppv", "3")

    first = client.post("/api/creators/alice/subscribe", json={"fanUsername": "fan"}).json()
    assert first["subscription"]["status"] == "active"
    assert first["transaction"]["amount"] == 5.0

    clock.advance(days=29)
    again = client.post("/api/creators/alice/subscribe", json={"fanUsername": "fan"}).json()
    assert again["alreadySubscribed"] is True
    assert again["subscription"]["id"] == first["subscription"]["id"]

    clock.advance(days=1)
    renewed = client.post("/api/creators/alice/subscribe", json={"fanUsername": "fan"}).json()
    assert "alreadySubscribed" not in renewed
    assert renewed["subscription"]["id"] != first["subscription"]["id"]

    assert client.get("/api/creators/alice/earnings").json()["totals"]["subscriptions"] == 10.0


def test_subscribe_to_free_creator(client, make_creator):
    make_creator("alice", account_type="free", price=None)
    resp = client.post("/api/creators/alice/subscribe", json={"fanUsername": "fan"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "This creator does not have a subscription plan."}


def test_token_identity_overrides_claimed_fan(client, login, make_creator, make_post):
    headers = login("bob@example.com", "bob")
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "ppv", "3")

    resp = client.post(
        f"/api/creators/alice/posts/{post['id']}/unlock",
        json={"fanUsername": "mallory"},
        headers=headers,
    )
    assert resp.json()["transaction"]["fanUsername"] == "bob"

    mallory = client.get("/api/creators/alice/posts", params={"fanUsername": "mallory"}).json()
    assert mallory[0]["locked"] is True
    bob = client.get("/api/creators/alice/posts", headers=headers).json()
    assert bob[0]["locked"] is False


def test_like_toggle(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "free", None)
    url = f"/api/creators/alice/posts/{post['id']}/like"

    on = client.post(url, json={"fanUsername": "Fan"}).json()
    assert on == {"success": True, "postId": post["id"], "likes": 1, "likedByMe": True}
    off = client.post(url, json={"fanUsername": "fan"}).json()
    assert off["likes"] == 0
    assert off["likedByMe"] is False


def test_like_requires_identity(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "free", None)
    assert client.post(f"/api/creators/alice/posts/{post['id']}/like").status_code == 400


def test_earnings_unknown_creator(client):
    assert client.get("/api/creators/ghost/earnings").status_code == 404
