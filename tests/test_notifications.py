"""
Notification reads, counters and the fallback page.
"""

from microblog.services.notification_service import NotificationService

from tests.fakes import FakeSupabase


def seeded():
    return FakeSupabase(notifications=[
        {"id": "n1", "user_id": "alice-id", "actor_id": "bob-id", "type": "like", "seen": False,
         "created_at": "2024-01-01T00:00:00+00:00"},
        {"id": "n2", "user_id": "alice-id", "actor_id": "bob-id", "type": "follow", "seen": True,
         "created_at": "2024-01-02T00:00:00+00:00"},
        {"id": "n3", "user_id": "bob-id", "actor_id": "alice-id", "type": "like", "seen": False,
         "created_at": "2024-01-03T00:00:00+00:00"},
    ])


def test_no_self_notifications():
    db = FakeSupabase()
    assert NotificationService(db).create_notification("alice-id", "alice-id", "like", post_id="p1") is None
    assert db.calls == []


def test_fetch_is_newest_first_and_can_filter_unread():
    service = NotificationService(seeded())
    assert [n["id"] for n in service.fetch_notifications("alice-id")] == ["n2", "n1"]
    assert [n["id"] for n in service.fetch_notifications("alice-id", only_unread=True)] == ["n1"]


def test_unread_count_and_mark_all_read():
    db = seeded()
    service = NotificationService(db)
    assert service.get_unread_notification_count("alice-id") == 1
    service.mark_all_notifications_as_read("alice-id")
    assert service.get_unread_notification_count("alice-id") == 0
    # other users untouched
    assert service.get_unread_notification_count("bob-id") == 1


def test_mark_one_read():
    db = seeded()
    NotificationService(db).mark_notification_as_read("n1")
    assert next(n for n in db.tables["notifications"] if n["id"] == "n1")["seen"] is True


def test_page_falls_back_to_samples():
    db = FakeSupabase()
    db.fail_tables.add("notifications")
    page = NotificationService(db).notifications_page("alice-id")
    assert page["is_fallback"] is True
    assert len(page["notifications"]) == 5
    assert {n["user_id"] for n in page["notifications"]} == {"alice-id"}


def test_notification_endpoints(client, db, alice_headers):
    db.tables["notifications"] = seeded().tables["notifications"]
    body = client.get("/api/notifications", headers=alice_headers).json()
    assert [n["id"] for n in body["notifications"]] == ["n2", "n1"]
    assert client.get("/api/notifications/unread-count", headers=alice_headers).json() == {"count": 1}
    client.post("/api/notifications/read-all", headers=alice_headers)
    assert client.get("/api/notifications/unread-count", headers=alice_headers).json() == {"count": 0}


def test_notifications_page_redirects_guests(client):
    response = client.get("/notifications", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
