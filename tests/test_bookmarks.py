"""
Bookmarks and bookmark collections.
"""

import pytest

from microblog.services.bookmark_service import BookmarkService

from tests.fakes import FakeSupabase


@pytest.fixture
def db():
    return FakeSupabase(posts=[{"id": "p1", "user_id": "bob-id", "content": "hi"}])


def test_bookmark_is_idempotent(db):
    service = BookmarkService(db)
    first = service.bookmark_post("alice-id", "p1")
    assert first["message"] == "Post bookmarked successfully"
    second = service.bookmark_post("alice-id", "p1")
    assert second["message"] == "Post already bookmarked"
    assert second["id"] == first["id"]
    assert len(db.tables["bookmarks"]) == 1


def test_bookmarking_missing_post_fails(db):
    with pytest.raises(LookupError):
        BookmarkService(db).bookmark_post("alice-id", "missing")


def test_remove_bookmark(db):
    service = BookmarkService(db)
    assert service.remove_bookmark("alice-id", "p1")["message"] == "Bookmark not found"
    service.bookmark_post("alice-id", "p1")
    assert service.remove_bookmark("alice-id", "p1")["message"] == "Bookmark removed successfully"
    assert db.tables["bookmarks"] == []


def test_list_bookmarks_by_collection(db):
    db.tables["bookmarks"] = [
        {"id": "b1", "user_id": "alice-id", "post_id": "p1", "collection_id": "c1",
         "created_at": "2024-01-01T00:00:00+00:00"},
        {"id": "b2", "user_id": "alice-id", "post_id": "p2", "collection_id": None,
         "created_at": "2024-01-02T00:00:00+00:00"},
        {"id": "b3", "user_id": "bob-id", "post_id": "p1", "collection_id": None,
         "created_at": "2024-01-03T00:00:00+00:00"},
    ]
    service = BookmarkService(db)
    assert [b["id"] for b in service.list_bookmarks("alice-id")["bookmarks"]] == ["b2", "b1"]
    assert [b["id"] for b in service.list_bookmarks("alice-id", "c1")["bookmarks"]] == ["b1"]


def test_bookmarks_and_collections_fall_back():
    db = FakeSupabase()
    db.fail_tables.update({"bookmarks", "bookmark_collections"})
    service = BookmarkService(db)
    saved = service.list_bookmarks("alice-id")
    assert saved["is_fallback"] is True
    assert len(saved["bookmarks"]) == 3
    assert [b["id"] for b in service.list_bookmarks("alice-id", "collection1")["bookmarks"]] == ["bookmark1"]
    assert len(service.list_collections("alice-id")["collections"]) == 2


def test_collections(db):
    service = BookmarkService(db)
    with pytest.raises(ValueError):
        service.create_collection("alice-id", "  ")
    collection = service.create_collection("alice-id", "Reading")
    assert collection["post_count"] == 0

    bookmark_id = service.bookmark_post("alice-id", "p1")["id"]
    moved = service.add_to_collection("alice-id", bookmark_id, collection["id"])
    assert moved["collection_id"] == collection["id"]
    with pytest.raises(LookupError):
        service.add_to_collection("bob-id", bookmark_id, collection["id"])


def test_collection_routes_are_not_read_as_post_ids(client, db, alice_headers):
    response = client.post("/api/bookmarks/collections", json={"name": "Later"}, headers=alice_headers)
    assert response.status_code == 201
    assert response.json()["name"] == "Later"
    body = client.get("/api/bookmarks/collections", headers=alice_headers).json()
    assert [c["name"] for c in body["collections"]] == ["Later"]


def test_bookmark_endpoints(client, db, alice_headers):
    db.tables["posts"] = [{"id": "p1", "user_id": "bob-id", "content": "hi"}]
    assert client.post("/api/bookmarks/p1", headers=alice_headers).json()["message"] == "Post bookmarked successfully"
    assert client.post("/api/bookmarks/nope", headers=alice_headers).status_code == 404
    assert client.delete("/api/bookmarks/p1", headers=alice_headers).json()["message"] == "Bookmark removed successfully"
