"""
Profiles, the follow graph and who-to-follow suggestions.
"""

import pytest

from microblog.services import fixtures
from microblog.services.user_service import UserService, validate_username

from tests.fakes import FakeSupabase


@pytest.fixture
def db():
    return FakeSupabase(users=[
        {"id": "alice-id", "username": "alice", "name": "Alice", "followers_count": 0, "following_count": 0},
        {"id": "bob-id", "username": "bob", "name": "Bob", "followers_count": 0, "following_count": 0},
    ])


def user(db, user_id):
    return next(row for row in db.tables["users"] if row["id"] == user_id)


def test_usernames_cannot_contain_spaces():
    assert validate_username("alice") == "alice"
    with pytest.raises(ValueError):
        validate_username("alice smith")


def test_follow_updates_both_counters_and_notifies(db):
    service = UserService(db)
    assert service.follow_user("alice-id", "bob-id") == {"success": True}
    assert service.is_following("alice-id", "bob-id") is True
    assert user(db, "bob-id")["followers_count"] == 1
    assert user(db, "alice-id")["following_count"] == 1

    [notification] = db.tables["notifications"]
    assert notification["type"] == "follow"
    assert notification["user_id"] == "bob-id"
    assert notification["actor_id"] == "alice-id"


def test_follow_twice_is_a_no_op(db):
    service = UserService(db)
    service.follow_user("alice-id", "bob-id")
    assert service.follow_user("alice-id", "bob-id") == {"already_following": True}
    assert user(db, "bob-id")["followers_count"] == 1
    assert len(db.tables["follows"]) == 1


def test_cannot_follow_yourself(db):
    with pytest.raises(ValueError):
        UserService(db).follow_user("alice-id", "alice-id")


def test_unfollow_reverses_follow(db):
    service = UserService(db)
    service.follow_user("alice-id", "bob-id")
    assert service.unfollow_user("alice-id", "bob-id") == {"success": True}
    assert db.tables["follows"] == []
    assert user(db, "bob-id")["followers_count"] == 0
    assert user(db, "alice-id")["following_count"] == 0
    assert db.tables["notifications"] == []


def test_follow_and_unfollow_survive_a_notifications_outage(db):
    db.fail_tables.add("notifications")
    service = UserService(db)
    assert service.follow_user("alice-id", "bob-id") == {"success": True}
    assert user(db, "bob-id")["followers_count"] == 1
    assert service.unfollow_user("alice-id", "bob-id") == {"success": True}
    assert user(db, "bob-id")["followers_count"] == 0


def test_unfollow_when_not_following(db):
    assert UserService(db).unfollow_user("alice-id", "bob-id") == {"not_following": True}


def test_counters_never_go_negative(db):
    db.tables["follows"] = [{"id": "f1", "follower_id": "alice-id", "following_id": "bob-id"}]
    UserService(db).unfollow_user("alice-id", "bob-id")
    assert user(db, "bob-id")["followers_count"] == 0


def test_follower_lists_use_embedded_profiles(db):
    db.tables["follows"] = [{
        "id": "f1", "follower_id": "alice-id", "following_id": "bob-id",
        "follower": {"id": "alice-id", "username": "alice"},
        "following": {"id": "bob-id", "username": "bob"},
    }]
    service = UserService(db)
    assert service.get_user_followers("bob-id") == [{"id": "alice-id", "username": "alice"}]
    assert service.get_user_following("alice-id") == [{"id": "bob-id", "username": "bob"}]
    assert service.follow_status("alice-id", ["bob-id", "carol-id"]) == ["bob-id"]


def test_update_profile_rejects_taken_username(db):
    with pytest.raises(ValueError, match="taken"):
        UserService(db).update_user_profile("alice-id", username="bob")


def test_update_profile_keeps_own_username(db):
    row = UserService(db).update_user_profile("alice-id", username="alice", bio="Hello", name=None)
    assert row["bio"] == "Hello"
    assert row["name"] == "Alice"


def test_update_profile_needs_fields(db):
    with pytest.raises(ValueError):
        UserService(db).update_user_profile("alice-id", name=None)


def test_avatar_upload_goes_to_profiles_bucket(db):
    url = UserService(db).upload_profile_image("alice-id", "avatar", b"png", "image/png")
    bucket, path, data, options = db.storage.uploads[0]
    assert bucket == "profiles"
    assert path.startswith("avatar-alice-id-")
    assert data == b"png"
    assert options == {"content-type": "image/png"}
    assert url == f"https://storage.test/profiles/{path}"
    assert user(db, "alice-id")["avatar_url"] == url


def test_profile_image_must_be_an_image(db):
    with pytest.raises(ValueError):
        UserService(db).upload_profile_image("alice-id", "cover", b"mp4", "video/mp4")


def test_suggestions_skip_followed_accounts(db):
    db.tables["follows"] = [{"id": "f1", "follower_id": "alice-id", "following_id": "user1"},
                            {"id": "f2", "follower_id": "alice-id", "following_id": "user2"}]
    picks = UserService(db).suggest_users("alice-id", count=3)
    assert len(picks) == 3
    assert not {"user1", "user2"} & {u["id"] for u in picks}


def test_suggestions_fall_back_to_first_samples(db):
    db.fail_tables.add("follows")
    picks = UserService(db).suggest_users("alice-id")
    assert picks == fixtures.FALLBACK_USERS[:3]


# ============================================================
# API
# ============================================================

def test_profile_endpoints(client):
    assert client.get("/api/users/alice").json()["username"] == "alice"
    assert client.get("/api/users/nobody").status_code == 404


def test_update_profile_endpoint_validates_username(client, alice_headers):
    response = client.put("/api/users/me", json={"username": "bad name"}, headers=alice_headers)
    assert response.status_code == 400
    assert "spaces" in response.json()["detail"]


def test_follow_endpoints(client, alice_headers):
    assert client.post("/api/users/bob-id/follow", headers=alice_headers).json()["message"] == "User followed successfully"
    assert client.get("/api/users/bob-id/follow", headers=alice_headers).json()["is_following"] is True
    assert client.post("/api/users/alice-id/follow", headers=alice_headers).status_code == 400
    assert client.delete("/api/users/bob-id/follow", headers=alice_headers).json()["message"] == "User unfollowed successfully"


def test_suggestions_endpoint_for_guest(client):
    body = client.get("/api/users/suggestions").json()
    assert len(body["users"]) == 3
    assert body["following"] == []
