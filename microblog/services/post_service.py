"""
Post Service - feed, posts, reposts, likes and comments.

Every operation is a short chain of Supabase calls. Counters are kept on
the post row and updated read-then-write; nothing here is transactional.
"""

import logging
from typing import List, Optional

from supabase import Client

from microblog.db.supabase import AUTHOR_FIELDS, TABLES, first_row
from microblog.schemas.schemas import FeedTab, NotificationType
from microblog.services import fixtures
from microblog.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

POST_FIELDS = f"*, {AUTHOR_FIELDS}"
POST_DETAIL_FIELDS = f"""
    *,
    {AUTHOR_FIELDS},
    comments (
        *,
        {AUTHOR_FIELDS}
    )
"""


def page_bounds(limit: int, page: int):
    """Inclusive row range for a zero-based page."""
    start = page * limit
    return start, start + limit - 1


class PostService:
    """Posts and the interactions hanging off them."""

    def __init__(self, client: Client):
        self.client = client
        self.notifications = NotificationService(client)

    def _posts(self):
        return self.client.table(TABLES["posts"])

    # ============================================================
    # READS
    # ============================================================

    def fetch_feed_posts(self, limit: int = 10, page: int = 0) -> List[dict]:
        """Newest posts from everyone."""
        start, end = page_bounds(limit, page)
        try:
            response = (
                self._posts()
                .select(POST_FIELDS)
                .order("created_at", desc=True)
                .range(start, end)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching feed posts: %s", e)
            raise
        return response.data or []

    def fetch_following_feed(self, user_id: str, limit: int = 10, page: int = 0) -> List[dict]:
        """Newest posts from the accounts a user follows, plus their own."""
        try:
            follows = (
                self.client.table(TABLES["follows"])
                .select("following_id")
                .eq("follower_id", user_id)
                .execute()
            )
            author_ids = [row["following_id"] for row in follows.data or []]
            author_ids.append(user_id)

            start, end = page_bounds(limit, page)
            response = (
                self._posts()
                .select(POST_FIELDS)
                .in_("user_id", author_ids)
                .order("created_at", desc=True)
                .range(start, end)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching following feed: %s", e)
            raise
        return response.data or []

    def home_feed(self, user_id: Optional[str], tab: FeedTab = FeedTab.for_you,
                  page: int = 0, limit: int = 10) -> dict:
        """
        Feed for the home page.

        Sample posts stand in when the query fails, when the following tab
        is opened without a session, and when the first page is empty. A
        signed-in following tab only gets samples from accounts the user
        follows, when there are any.
        """
        if tab == FeedTab.following and not user_id:
            return self._fallback_feed(page, limit)
        following_of = user_id if tab == FeedTab.following else None
        try:
            if tab == FeedTab.following:
                posts = self.fetch_following_feed(user_id, limit, page)
            else:
                posts = self.fetch_feed_posts(limit, page)
        except Exception:
            return self._fallback_feed(page, limit, following_of)

        if not posts and page == 0:
            return self._fallback_feed(page, limit, following_of)
        return {"posts": posts, "page": page, "has_more": len(posts) >= limit, "is_fallback": False}

    def _fallback_feed(self, page: int, limit: int, following_of: Optional[str] = None) -> dict:
        posts = fixtures.generate_posts()
        if following_of:
            posts = fixtures.feed_posts_for(posts, self._following_ids(following_of)) or posts
        posts = posts[:limit]
        return {"posts": posts, "page": page, "has_more": len(posts) >= limit, "is_fallback": True}

    def _following_ids(self, user_id: str) -> List[str]:
        try:
            rows = (
                self.client.table(TABLES["follows"])
                .select("following_id")
                .eq("follower_id", user_id)
                .execute()
                .data or []
            )
        except Exception as e:
            logger.error("Error fetching followed accounts: %s", e)
            return []
        return [row["following_id"] for row in rows]

    def fetch_user_posts(self, username: str, limit: int = 10, page: int = 0) -> Optional[List[dict]]:
        """Posts by username, or None if there is no such user."""
        try:
            user = first_row(
                self.client.table(TABLES["users"]).select("id").eq("username", username).limit(1).execute()
            )
            if user is None:
                return None
            start, end = page_bounds(limit, page)
            response = (
                self._posts()
                .select(POST_FIELDS)
                .eq("user_id", user["id"])
                .order("created_at", desc=True)
                .range(start, end)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching user posts: %s", e)
            raise
        return response.data or []

    def profile_posts(self, owner: dict, limit: int = 10, page: int = 0) -> dict:
        """A profile's posts; the owner's sample posts if the read fails."""
        try:
            return {"posts": self.fetch_user_posts(owner["username"], limit, page) or [], "is_fallback": False}
        except Exception:
            start, end = page_bounds(limit, page)
            posts = fixtures.filter_posts_by_user(fixtures.generate_posts(), owner["id"])
            return {"posts": posts[start:end + 1], "is_fallback": True}

    def fetch_post(self, post_id: str) -> Optional[dict]:
        """Single post with author and comments."""
        try:
            post = first_row(
                self._posts().select(POST_DETAIL_FIELDS).eq("id", post_id).limit(1).execute()
            )
        except Exception as e:
            logger.error("Error fetching post: %s", e)
            raise
        if post is not None:
            post.setdefault("comments", [])
        return post

    def fetch_popular_posts(self, limit: int = 10) -> List[dict]:
        """Most liked posts, for the explore page."""
        try:
            response = (
                self._posts()
                .select(POST_FIELDS)
                .order("likes_count", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching popular posts: %s", e)
            raise
        return response.data or []

    def search_posts(self, term: str) -> List[dict]:
        """Posts whose text contains the term or the term as a hashtag."""
        term = term.strip().lstrip("#")
        if not term:
            return []
        try:
            response = (
                self._posts()
                .select(POST_FIELDS)
                .or_(f"content.ilike.%{term}%,content.ilike.%#{term}%")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching search results: %s", e)
            raise
        return response.data or []

    # ============================================================
    # WRITES
    # ============================================================

    def create_post(
        self,
        user_id: str,
        content: str,
        media_urls: Optional[List[str]] = None,
        media_types: Optional[List[str]] = None,
        location: Optional[str] = None,
        scheduled_for: Optional[str] = None,
    ) -> dict:
        row = {
            "user_id": user_id,
            "content": content,
            "media_urls": media_urls or [],
            "media_types": media_types or [],
            "likes_count": 0,
            "reposts_count": 0,
            "comments_count": 0,
            "views_count": 0,
            "is_repost": False,
        }
        if location:
            row["location"] = location
        if scheduled_for:
            row["scheduled_for"] = scheduled_for
        try:
            response = self._posts().insert(row).execute()
        except Exception as e:
            logger.error("Error creating post: %s", e)
            raise
        return response.data[0]

    def repost_post(self, user_id: str, original_post_id: str) -> Optional[dict]:
        """Repost: a new empty post pointing at the original and sharing its media."""
        try:
            original = first_row(self._posts().select("*").eq("id", original_post_id).limit(1).execute())
        except Exception as e:
            logger.error("Error fetching original post: %s", e)
            raise
        if original is None:
            return None

        try:
            response = self._posts().insert({
                "user_id": user_id,
                "content": "",
                "media_urls": original.get("media_urls"),
                "media_types": original.get("media_types"),
                "likes_count": 0,
                "reposts_count": 0,
                "comments_count": 0,
                "views_count": 0,
                "is_repost": True,
                "original_post_id": original_post_id,
            }).execute()
        except Exception as e:
            logger.error("Error creating repost: %s", e)
            raise
        repost = response.data[0]

        # The repost stays even if the counter update fails
        try:
            self._posts().update(
                {"reposts_count": (original.get("reposts_count") or 0) + 1}
            ).eq("id", original_post_id).execute()
            self.notifications.create_notification(
                original["user_id"], user_id, NotificationType.repost.value, post_id=original_post_id
            )
        except Exception as e:
            logger.error("Error updating repost count: %s", e)
        return repost

    def like_post(self, user_id: str, post_id: str) -> dict:
        likes = self.client.table(TABLES["likes"])
        try:
            existing = likes.select("id").eq("user_id", user_id).eq("post_id", post_id).execute()
        except Exception as e:
            logger.error("Error checking like status: %s", e)
            raise
        if existing.data:
            return {"already_liked": True}

        try:
            post = first_row(self._posts().select("likes_count, user_id").eq("id", post_id).limit(1).execute())
            if post is None:
                raise LookupError(f"Post {post_id} not found")
            likes.insert({"user_id": user_id, "post_id": post_id}).execute()
            self._posts().update({"likes_count": (post.get("likes_count") or 0) + 1}).eq("id", post_id).execute()
        except Exception as e:
            logger.error("Error liking post: %s", e)
            raise

        try:
            self.notifications.create_notification(
                post["user_id"], user_id, NotificationType.like.value, post_id=post_id
            )
        except Exception as e:
            logger.error("Error notifying like: %s", e)
        return {"success": True}

    def unlike_post(self, user_id: str, post_id: str) -> dict:
        try:
            post = first_row(self._posts().select("id, likes_count").eq("id", post_id).limit(1).execute())
            if post is None:
                raise LookupError(f"Post {post_id} not found")
            existing = first_row(
                self.client.table(TABLES["likes"])
                .select("id")
                .eq("user_id", user_id)
                .eq("post_id", post_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching post to unlike: %s", e)
            raise
        if existing is None:
            return {"success": True, "message": "Post was not liked"}

        try:
            self.client.table(TABLES["likes"]).delete().eq("id", existing["id"]).execute()
            self._posts().update(
                {"likes_count": max(0, (post.get("likes_count") or 0) - 1)}
            ).eq("id", post_id).execute()
        except Exception as e:
            logger.error("Error unliking post: %s", e)
            raise

        try:
            self.notifications.remove_notification(user_id, NotificationType.like.value, post_id=post_id)
        except Exception as e:
            logger.error("Error removing like notification: %s", e)
        return {"success": True, "message": "Post unliked successfully"}

    def add_comment(self, user_id: str, post_id: str, content: str) -> dict:
        content = content.strip()
        if not content:
            raise ValueError("Comment cannot be empty")
        try:
            post = first_row(
                self._posts().select("comments_count, user_id").eq("id", post_id).limit(1).execute()
            )
            if post is None:
                raise LookupError(f"Post {post_id} not found")
            comment = self.client.table(TABLES["comments"]).insert({
                "user_id": user_id,
                "post_id": post_id,
                "content": content,
                "likes_count": 0,
            }).execute().data[0]
            self._posts().update(
                {"comments_count": (post.get("comments_count") or 0) + 1}
            ).eq("id", post_id).execute()
        except Exception as e:
            logger.error("Error adding comment: %s", e)
            raise

        try:
            self.notifications.create_notification(
                post["user_id"], user_id, NotificationType.comment.value,
                post_id=post_id, comment_id=comment["id"],
            )
        except Exception as e:
            logger.error("Error notifying comment: %s", e)
        return comment
