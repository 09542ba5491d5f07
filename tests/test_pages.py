"""
Server-rendered pages render with live data, sample data and no session.
"""

from microblog import main

from tests.conftest import make_token


def test_home_shows_sample_feed_and_trending(client, db):
    db.fail_tables.add("trending_topics")
    response = client.get("/")
    assert response.status_code == 200
    assert "#Programming" in response.text
    assert "Showing sample posts" in response.text
    assert "Who to follow" in response.text


def test_home_following_tab_for_guest(client):
    response = client.get("/?tab=following")
    assert response.status_code == 200
    assert "Showing sample posts" in response.text


def test_public_pages_render(client):
    for path in ("/explore", "/explore?tag=AI", "/search", "/search?q=python", "/jobs", "/communities",
                 "/login", "/signup"):
        assert client.get(path).status_code == 200, path


def test_protected_pages_redirect_guests(client):
    for path in ("/compose", "/notifications", "/messages", "/messages/bob-id", "/bookmarks",
                 "/settings/profile"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303, path
        assert response.headers["location"] == "/login"


def test_signed_in_pages_render(client, db):
    client.cookies.set("access_token", make_token())
    for path in ("/compose", "/notifications", "/messages", "/messages/bob-id", "/bookmarks",
                 "/settings/profile"):
        assert client.get(path).status_code == 200, path


def test_notifications_page_marks_all_read(client, db):
    db.tables["notifications"] = [{"id": "n1", "user_id": "alice-id", "actor_id": "bob-id", "type": "follow",
                                   "seen": False, "created_at": "2024-01-01T00:00:00+00:00",
                                   "actor": {"id": "bob-id", "username": "bob", "name": "Bob"}}]
    client.cookies.set("access_token", make_token())
    response = client.get("/notifications")
    assert "followed you" in response.text
    assert db.tables["notifications"][0]["seen"] is True


def test_profile_pages(client, db):
    assert "Alice" in client.get("/profile/alice").text
    assert client.get("/profile/nobody").status_code == 404
    assert client.get("/profile/alice/followers").status_code == 200
    assert client.get("/profile/alice/likes").status_code == 404


def test_settings_rejects_taken_username(client, db):
    client.cookies.set("access_token", make_token())
    response = client.post("/settings/profile", data={"name": "Alice", "username": "bob"})
    assert response.status_code == 400
    assert "already taken" in response.text


def test_send_message_form(client, db):
    client.cookies.set("access_token", make_token())
    response = client.post("/messages/bob-id", data={"content": "hello"}, follow_redirects=False)
    assert response.status_code == 303
    assert db.tables["messages"][0]["content"] == "hello"


def test_health(client, monkeypatch):
    monkeypatch.setattr(main, "test_supabase_connection", lambda: True)
    body = client.get("/health").json()
    assert body["supabase"] == "connected"
    assert body["cloudinary"] == "not configured"


def test_empty_message_shows_error(client, db):
    client.cookies.set("access_token", make_token())
    response = client.post("/messages/bob-id", data={"content": "   "}, follow_redirects=False)
    assert response.status_code == 400
    assert "Message cannot be empty" in response.text
    assert db.tables.get("messages", []) == []


def test_messaging_yourself_shows_error(client, db):
    client.cookies.set("access_token", make_token())
    response = client.post("/messages/alice-id", data={"content": "hi me"}, follow_redirects=False)
    assert response.status_code == 400
    assert "You cannot message yourself" in response.text


def test_failed_join_shows_error(client, db):
    db.tables["communities"] = [{"id": "c1", "name": "Pythonistas", "member_count": 3}]
    db.fail_tables.add("community_members")
    client.cookies.set("access_token", make_token())
    response = client.post("/communities/c1/join", follow_redirects=False)
    assert response.status_code == 500
    assert "Failed to join community" in response.text
    assert "Pythonistas" in response.text


def test_join_redirects_back(client, db):
    db.tables["communities"] = [{"id": "c1", "name": "Pythonistas", "member_count": 3}]
    client.cookies.set("access_token", make_token())
    response = client.post("/communities/c1/join", follow_redirects=False)
    assert response.status_code == 303
    assert db.tables["community_members"][0]["community_id"] == "c1"


def test_profile_of_sample_account_when_backend_is_down(client, db):
    db.fail_tables.update({"users", "posts"})
    response = client.get("/profile/techguru")
    assert response.status_code == 200
    assert "Tech Guru" in response.text
    assert "Showing sample posts" in response.text
    assert client.get("/profile/nobody").status_code == 404
