"""
Post management and the entitlement-aware listing.
"""


def test_create_post_with_media(client, make_creator, upload_store):
    make_creator("alice", account_type="free", price=None)
    resp = client.post(
        "/api/creators/alice/posts",
        data={"title": "Clip", "visibility": "ppv", "price": "2", "description": "behind the scenes"},
        files={"media": ("clip.mp4", b"video", "video/mp4")},
    )
    assert resp.status_code == 200
    post = resp.json()["post"]
    assert post["price"] == 2.0
    assert post["mediaMime"] == "video/mp4"
    assert upload_store.read(post["mediaFilename"]) == b"video"


def test_create_post_for_unknown_creator(client):
    resp = client.post("/api/creators/ghost/posts", data={"title": "T", "visibility": "free"})
    assert resp.status_code == 404


def test_guest_sees_locked_ppv(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    make_post("alice", "free", None, title="Open", description="hi")
    make_post("alice", "ppv", "3", title="Paid", description="secret")

    posts = client.get("/api/creators/alice/posts").json()
    assert [(p["title"], p["locked"]) for p in posts] == [("Open", False), ("Paid", True)]
    assert posts[0]["description"] == "hi"
    assert posts[1]["description"] == ""
    assert posts[1]["mediaFilename"] is None
    assert posts[1]["price"] == 3.0


def test_owner_sees_everything(client, login, make_creator, make_post):
    headers = login("alice@example.com", "alice")
    make_creator("alice")
    make_post("alice", "ppv", "3", description="secret")

    posts = client.get("/api/creators/alice/posts", headers=headers).json()
    assert posts[0]["locked"] is False
    assert posts[0]["description"] == "secret"


def test_claimed_owner_name_does_not_unlock(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    make_post("alice", "ppv", "3")
    posts = client.get("/api/creators/alice/posts", params={"fanUsername": "alice"}).json()
    assert posts[0]["locked"] is True


def test_update_post(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "ppv", "3")
    resp = client.patch(f"/api/creators/alice/posts/{post['id']}", json={"price": "9.5"})
    assert resp.status_code == 200
    assert resp.json()["post"]["price"] == 9.5


def test_update_unknown_post(client, make_creator):
    make_creator("alice")
    assert client.patch("/api/creators/alice/posts/99", json={"title": "x"}).status_code == 404


def test_delete_post(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    post = make_post("alice", "free", None)
    assert client.delete(f"/api/creators/alice/posts/{post['id']}").json() == {"success": True}
    assert client.get("/api/creators/alice/posts").json() == []
    assert client.delete(f"/api/creators/alice/posts/{post['id']}").status_code == 404


def test_post_of_other_creator_is_404(client, make_creator, make_post):
    make_creator("alice", account_type="free", price=None)
    make_creator("bob", account_type="free", price=None)
    post = make_post("alice", "free", None)
    assert client.delete(f"/api/creators/bob/posts/{post['id']}").status_code == 404
