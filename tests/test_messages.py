"""
Direct messages: conversation grouping, threads and read receipts.
"""

import pytest

from microblog.services.message_service import MessageService, group_conversations

from tests.fakes import FakeSupabase

ALICE = {"id": "alice-id", "username": "alice", "name": "Alice", "avatar_url": None}
BOB = {"id": "bob-id", "username": "bob", "name": "Bob", "avatar_url": None}
CAROL = {"id": "carol-id", "username": "carol", "name": "Carol", "avatar_url": None}


def message(message_id, sender, receiver, created_at, is_read=False, content="hi"):
    return {
        "id": message_id, "sender_id": sender["id"], "receiver_id": receiver["id"],
        "content": content, "is_read": is_read, "created_at": created_at,
        "sender": sender, "receiver": receiver,
    }


@pytest.fixture
def db():
    return FakeSupabase(messages=[
        message("m1", BOB, ALICE, "2024-01-01T10:00:00+00:00"),
        message("m2", ALICE, BOB, "2024-01-01T11:00:00+00:00", is_read=True),
        message("m3", BOB, ALICE, "2024-01-01T12:00:00+00:00", content="latest from bob"),
        message("m4", CAROL, ALICE, "2024-01-02T09:00:00+00:00", is_read=True, content="from carol"),
        message("m5", BOB, CAROL, "2024-01-03T09:00:00+00:00", content="not alice's"),
    ])


def test_grouping_by_counterpart(db):
    conversations = group_conversations("alice-id", db.tables["messages"][:4])
    assert [c["user"]["id"] for c in conversations] == ["carol-id", "bob-id"]

    carol, bob = conversations
    assert carol["unread_count"] == 0
    assert bob["unread_count"] == 2
    assert bob["last_message"]["id"] == "m3"


def test_sent_messages_never_count_as_unread():
    messages = [message("m1", ALICE, BOB, "2024-01-01T10:00:00+00:00", is_read=False)]
    [conversation] = group_conversations("alice-id", messages)
    assert conversation["unread_count"] == 0
    assert conversation["user"]["username"] == "bob"


def test_fetch_conversations_only_includes_own_messages(db):
    result = MessageService(db).fetch_conversations("alice-id")
    assert result["is_fallback"] is False
    assert [c["last_message"]["content"] for c in result["conversations"]] == ["from carol", "latest from bob"]


def test_conversations_fall_back_to_samples():
    db = FakeSupabase()
    db.fail_tables.add("messages")
    result = MessageService(db).fetch_conversations("alice-id")
    assert result["is_fallback"] is True
    assert len(result["conversations"]) == 3
    assert [c["unread_count"] for c in result["conversations"]] == [3, 0, 0]


def test_thread_is_oldest_first_and_marks_received_read(db):
    thread = MessageService(db).fetch_thread("alice-id", "bob-id")
    assert [m["id"] for m in thread["messages"]] == ["m1", "m2", "m3"]
    assert all(m["is_read"] for m in thread["messages"])

    stored = {m["id"]: m["is_read"] for m in db.tables["messages"]}
    assert stored["m1"] is True
    assert stored["m3"] is True
    # bob's message to carol is untouched
    assert stored["m5"] is False


def test_thread_falls_back_to_samples():
    db = FakeSupabase()
    db.fail_tables.add("messages")
    thread = MessageService(db).fetch_thread("alice-id", "bob-id")
    assert thread["is_fallback"] is True
    assert len(thread["messages"]) == 4
    times = [m["created_at"] for m in thread["messages"]]
    assert times == sorted(times)


def test_send_message_validation(db):
    service = MessageService(db)
    with pytest.raises(ValueError):
        service.send_message("alice-id", "bob-id", "   ")
    with pytest.raises(ValueError):
        service.send_message("alice-id", "alice-id", "hello me")

    sent = service.send_message("alice-id", "bob-id", " hello ")
    assert sent["content"] == "hello"
    assert sent["is_read"] is False


def test_message_endpoints(client, db, alice_headers):
    db.tables["messages"] = [message("m1", BOB, ALICE, "2024-01-01T10:00:00+00:00")]
    body = client.get("/api/messages", headers=alice_headers).json()
    assert body["conversations"][0]["unread_count"] == 1

    thread = client.get("/api/messages/bob-id", headers=alice_headers).json()
    assert thread["messages"][0]["is_read"] is True

    response = client.post("/api/messages", json={"receiver_id": "bob-id", "content": ""}, headers=alice_headers)
    assert response.status_code == 400
    response = client.post("/api/messages", json={"receiver_id": "bob-id", "content": "yo"}, headers=alice_headers)
    assert response.status_code == 201
