"""
Bookmark Service - saved posts and bookmark collections.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from microblog.db.supabase import AUTHOR_FIELDS, TABLES, first_row
from microblog.services import fixtures

logger = logging.getLogger(__name__)

BOOKMARK_FIELDS = f"""
    *,
    posts:post_id (
        *,
        {AUTHOR_FIELDS}
    )
"""


class BookmarkService:

    def __init__(self, client: Client):
        self.client = client

    def _bookmarks(self):
        return self.client.table(TABLES["bookmarks"])

    def _collections(self):
        return self.client.table(TABLES["bookmark_collections"])

    def _find(self, user_id: str, post_id: str) -> Optional[dict]:
        return first_row(
            self._bookmarks().select("id").eq("user_id", user_id).eq("post_id", post_id).limit(1).execute()
        )

    def bookmark_post(self, user_id: str, post_id: str) -> dict:
        try:
            post = first_row(self.client.table(TABLES["posts"]).select("id").eq("id", post_id).limit(1).execute())
            if post is None:
                raise LookupError(f"Post {post_id} not found")
            existing = self._find(user_id, post_id)
        except Exception as e:
            logger.error("Error checking existing bookmark: %s", e)
            raise
        if existing:
            return {"success": True, "message": "Post already bookmarked", "id": existing["id"]}

        try:
            response = self._bookmarks().insert({
                "user_id": user_id,
                "post_id": post_id,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            logger.error("Error bookmarking post: %s", e)
            raise
        return {"success": True, "message": "Post bookmarked successfully", "id": response.data[0]["id"]}

    def remove_bookmark(self, user_id: str, post_id: str) -> dict:
        try:
            if self._find(user_id, post_id) is None:
                return {"success": True, "message": "Bookmark not found"}
            self._bookmarks().delete().eq("user_id", user_id).eq("post_id", post_id).execute()
        except Exception as e:
            logger.error("Error removing bookmark: %s", e)
            raise
        return {"success": True, "message": "Bookmark removed successfully"}

    def list_bookmarks(self, user_id: str, collection_id: Optional[str] = None) -> dict:
        """Saved posts, newest first; sample bookmarks if the read fails."""
        try:
            query = self._bookmarks().select(BOOKMARK_FIELDS).eq("user_id", user_id)
            if collection_id:
                query = query.eq("collection_id", collection_id)
            bookmarks = query.order("created_at", desc=True).execute().data or []
            return {"bookmarks": bookmarks, "is_fallback": False}
        except Exception as e:
            logger.error("Error fetching bookmarks: %s", e)
        bookmarks = fixtures.fallback_bookmarks(user_id)
        if collection_id:
            bookmarks = [b for b in bookmarks if b["collection_id"] == collection_id]
        return {"bookmarks": bookmarks, "is_fallback": True}

    def list_collections(self, user_id: str) -> dict:
        try:
            collections = self._collections().select("*").eq("user_id", user_id).execute().data or []
            return {"collections": collections, "is_fallback": False}
        except Exception as e:
            logger.error("Error fetching collections: %s", e)
        return {"collections": fixtures.fallback_collections(user_id), "is_fallback": True}

    def create_collection(self, user_id: str, name: str) -> dict:
        name = name.strip()
        if not name:
            raise ValueError("Collection name cannot be empty")
        try:
            response = self._collections().insert({"user_id": user_id, "name": name, "post_count": 0}).execute()
        except Exception as e:
            logger.error("Error creating collection: %s", e)
            raise
        return response.data[0]

    def add_to_collection(self, user_id: str, bookmark_id: str, collection_id: str) -> dict:
        try:
            response = (
                self._bookmarks()
                .update({"collection_id": collection_id})
                .eq("id", bookmark_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("Error adding to collection: %s", e)
            raise
        if not response.data:
            raise LookupError(f"Bookmark {bookmark_id} not found")
        return response.data[0]
