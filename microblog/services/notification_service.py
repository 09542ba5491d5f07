"""
Notification Service - reads and writes on the notifications table.

A notification row is created by the action that caused it (like, comment,
follow, repost) and removed again when that action is undone.
"""

import logging
from typing import Callable, List, Optional

from supabase import AsyncClient, Client

from microblog.db.supabase import TABLES, subscribe_to_table
from microblog.services import fixtures

logger = logging.getLogger(__name__)

NOTIFICATION_FIELDS = """
    *,
    actor:actor_id (id, name, username, avatar_url),
    post:post_id (id, content),
    comment:comment_id (id, content)
"""


class NotificationService:
    """Notifications for one backend client."""

    def __init__(self, client: Client):
        self.client = client

    def _table(self):
        return self.client.table(TABLES["notifications"])

    def fetch_notifications(self, user_id: str, only_unread: bool = False, limit: int = 50) -> List[dict]:
        """Newest notifications for a user, with actor/post/comment embedded."""
        query = (
            self._table()
            .select(NOTIFICATION_FIELDS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
        )
        if only_unread:
            query = query.eq("seen", False)
        try:
            return query.execute().data or []
        except Exception as e:
            logger.error("Error fetching notifications: %s", e)
            raise

    def notifications_page(self, user_id: str, limit: int = 50) -> dict:
        """Notifications for the page view; sample notifications if the read fails."""
        try:
            return {"notifications": self.fetch_notifications(user_id, limit=limit), "is_fallback": False}
        except Exception:
            return {"notifications": fixtures.fallback_notifications(user_id), "is_fallback": True}

    def mark_notification_as_read(self, notification_id: str) -> dict:
        try:
            self._table().update({"seen": True}).eq("id", notification_id).execute()
        except Exception as e:
            logger.error("Error marking notification as read: %s", e)
            raise
        return {"success": True}

    def mark_all_notifications_as_read(self, user_id: str) -> dict:
        try:
            self._table().update({"seen": True}).eq("user_id", user_id).eq("seen", False).execute()
        except Exception as e:
            logger.error("Error marking all notifications as read: %s", e)
            raise
        return {"success": True}

    def get_unread_notification_count(self, user_id: str) -> int:
        try:
            response = (
                self._table()
                .select("id", count="exact")
                .eq("user_id", user_id)
                .eq("seen", False)
                .execute()
            )
        except Exception as e:
            logger.error("Error counting unread notifications: %s", e)
            raise
        return response.count or 0

    def create_notification(
        self,
        user_id: str,
        actor_id: str,
        notification_type: str,
        post_id: Optional[str] = None,
        comment_id: Optional[str] = None,
    ) -> Optional[dict]:
        """Insert a notification. Users are never notified about themselves."""
        if user_id == actor_id:
            return None
        row = {
            "user_id": user_id,
            "actor_id": actor_id,
            "type": notification_type,
            "seen": False,
        }
        if post_id is not None:
            row["post_id"] = post_id
        if comment_id is not None:
            row["comment_id"] = comment_id
        response = self._table().insert(row).execute()
        return response.data[0] if response.data else None

    def remove_notification(
        self,
        actor_id: str,
        notification_type: str,
        user_id: Optional[str] = None,
        post_id: Optional[str] = None,
    ) -> None:
        query = self._table().delete().eq("type", notification_type).eq("actor_id", actor_id)
        if user_id is not None:
            query = query.eq("user_id", user_id)
        if post_id is not None:
            query = query.eq("post_id", post_id)
        query.execute()


async def subscribe_to_notifications(client: AsyncClient, user_id: str, callback: Callable[[dict], None]):
    """Realtime: new notifications for this user only."""
    def on_insert(record: dict):
        if record.get("user_id") == user_id:
            callback(record)

    return await subscribe_to_table(
        client,
        TABLES["notifications"],
        "INSERT",
        on_insert,
        row_filter=f"user_id=eq.{user_id}",
        channel_name=f"notifications-{user_id}",
    )
