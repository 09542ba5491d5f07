"""
User Service - profiles and the follow graph.

follows rows are the graph; followers_count / following_count on users
are denormalized counters bumped read-then-write after each change.
"""

import logging
import random
import time
from typing import Iterable, List, Optional

from supabase import Client

from microblog.core.config import get_settings
from microblog.db.supabase import TABLES, first_row
from microblog.schemas.schemas import NotificationType
from microblog.services import fixtures
from microblog.services.notification_service import NotificationService

logger = logging.getLogger(__name__)
settings = get_settings()

SUMMARY_FIELDS = "id, username, name, avatar_url"
PROFILE_IMAGE_KINDS = ("avatar", "cover")


def validate_username(username: str) -> str:
    if " " in username:
        raise ValueError("Username cannot contain spaces")
    return username


class UserService:
    """Profiles, follows and suggestions."""

    def __init__(self, client: Client):
        self.client = client
        self.notifications = NotificationService(client)

    def _users(self):
        return self.client.table(TABLES["users"])

    def _follows(self):
        return self.client.table(TABLES["follows"])

    # ============================================================
    # PROFILES
    # ============================================================

    def fetch_user_by_username(self, username: str) -> Optional[dict]:
        try:
            return first_row(self._users().select("*").eq("username", username).limit(1).execute())
        except Exception as e:
            logger.error("Error fetching user: %s", e)
            raise

    def fetch_user_by_id(self, user_id: str) -> Optional[dict]:
        try:
            return first_row(self._users().select("*").eq("id", user_id).limit(1).execute())
        except Exception as e:
            logger.error("Error fetching user profile: %s", e)
            raise

    def username_taken(self, username: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self._users().select("id").eq("username", username)
        if exclude_user_id:
            query = query.neq("id", exclude_user_id)
        return bool(query.execute().data)

    def update_user_profile(self, user_id: str, **fields) -> dict:
        """
        Update profile columns. Only non-None fields are sent.

        Raises ValueError for a username with spaces or one already taken.
        """
        updates = {key: value for key, value in fields.items() if value is not None}
        if not updates:
            raise ValueError("No fields to update")

        username = updates.get("username")
        if username:
            validate_username(username)
            if self.username_taken(username, exclude_user_id=user_id):
                raise ValueError("Username is already taken")

        try:
            response = self._users().update(updates).eq("id", user_id).execute()
        except Exception as e:
            logger.error("Error updating user profile: %s", e)
            raise
        if not response.data:
            raise LookupError(f"User {user_id} not found")
        return response.data[0]

    def upload_profile_image(self, user_id: str, kind: str, data: bytes, content_type: str) -> str:
        """
        Store an avatar or cover image in the profiles bucket and point the
        user row at its public URL. Returns the URL.
        """
        if kind not in PROFILE_IMAGE_KINDS:
            raise ValueError(f"Unknown profile image kind '{kind}'")
        if not content_type.startswith("image/"):
            raise ValueError("Profile images must be images")

        path = f"{kind}-{user_id}-{int(time.time() * 1000)}"
        bucket = self.client.storage.from_(settings.profiles_bucket)
        try:
            bucket.upload(path, data, {"content-type": content_type})
        except Exception as e:
            logger.error("Error uploading %s image: %s", kind, e)
            raise
        url = bucket.get_public_url(path)
        self.update_user_profile(user_id, **{f"{kind}_url": url})
        return url

    # ============================================================
    # FOLLOW GRAPH
    # ============================================================

    def is_following(self, follower_id: str, target_user_id: str) -> bool:
        try:
            response = (
                self._follows()
                .select("id")
                .eq("follower_id", follower_id)
                .eq("following_id", target_user_id)
                .execute()
            )
        except Exception as e:
            logger.error("Error checking follow status: %s", e)
            raise
        return bool(response.data)

    def _bump_counter(self, user_id: str, column: str, delta: int) -> None:
        row = first_row(self._users().select(column).eq("id", user_id).limit(1).execute())
        if row is None:
            raise LookupError(f"User {user_id} not found")
        value = max(0, (row.get(column) or 0) + delta)
        self._users().update({column: value}).eq("id", user_id).execute()

    def follow_user(self, follower_id: str, target_user_id: str) -> dict:
        if follower_id == target_user_id:
            raise ValueError("You cannot follow yourself")
        if self.is_following(follower_id, target_user_id):
            return {"already_following": True}

        try:
            self._follows().insert({"follower_id": follower_id, "following_id": target_user_id}).execute()
            self._bump_counter(target_user_id, "followers_count", 1)
            self._bump_counter(follower_id, "following_count", 1)
        except Exception as e:
            logger.error("Error following user: %s", e)
            raise

        try:
            self.notifications.create_notification(target_user_id, follower_id, NotificationType.follow.value)
        except Exception as e:
            logger.error("Error notifying follow: %s", e)
        return {"success": True}

    def unfollow_user(self, follower_id: str, target_user_id: str) -> dict:
        if not self.is_following(follower_id, target_user_id):
            return {"not_following": True}

        try:
            self._follows().delete().eq("follower_id", follower_id).eq("following_id", target_user_id).execute()
            self._bump_counter(target_user_id, "followers_count", -1)
            self._bump_counter(follower_id, "following_count", -1)
        except Exception as e:
            logger.error("Error unfollowing user: %s", e)
            raise

        try:
            self.notifications.remove_notification(
                follower_id, NotificationType.follow.value, user_id=target_user_id
            )
        except Exception as e:
            logger.error("Error removing follow notification: %s", e)
        return {"success": True}

    def get_user_followers(self, user_id: str) -> List[dict]:
        try:
            response = (
                self._follows()
                .select(f"follower:follower_id ({SUMMARY_FIELDS})")
                .eq("following_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching followers: %s", e)
            raise
        return [row["follower"] for row in response.data or [] if row.get("follower")]

    def get_user_following(self, user_id: str) -> List[dict]:
        try:
            response = (
                self._follows()
                .select(f"following:following_id ({SUMMARY_FIELDS})")
                .eq("follower_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching following: %s", e)
            raise
        return [row["following"] for row in response.data or [] if row.get("following")]

    def get_following_ids(self, user_id: str) -> List[str]:
        response = self._follows().select("following_id").eq("follower_id", user_id).execute()
        return [row["following_id"] for row in response.data or []]

    def follow_status(self, user_id: str, candidate_ids: Iterable[str]) -> List[str]:
        """Which of the candidates the user already follows."""
        candidate_ids = list(candidate_ids)
        if not candidate_ids:
            return []
        try:
            response = (
                self._follows()
                .select("following_id")
                .eq("follower_id", user_id)
                .in_("following_id", candidate_ids)
                .execute()
            )
        except Exception as e:
            logger.error("Error checking follow status: %s", e)
            return []
        return [row["following_id"] for row in response.data or []]

    # ============================================================
    # DISCOVERY
    # ============================================================

    def suggest_users(self, user_id: Optional[str], count: int = 3) -> List[dict]:
        """
        Who-to-follow picks from the sample accounts.

        Signed-in users never see accounts they already follow. If the
        follow lookup fails the first sample accounts are shown.
        """
        candidates = fixtures.FALLBACK_USERS
        if user_id:
            try:
                following = set(self.get_following_ids(user_id))
            except Exception as e:
                logger.error("Error fetching suggested users: %s", e)
                return candidates[:count]
            candidates = [user for user in candidates if user["id"] not in following]
        return random.sample(candidates, min(count, len(candidates)))

    def search_users(self, query: str, limit: int = 3) -> List[dict]:
        query = query.strip().lstrip("@")
        if not query:
            return []
        try:
            response = (
                self._users()
                .select(SUMMARY_FIELDS)
                .or_(f"username.ilike.%{query}%,name.ilike.%{query}%")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error("Error searching users: %s", e)
            raise
        return response.data or []

    def top_users(self, limit: int = 5) -> List[dict]:
        try:
            response = (
                self._users()
                .select(f"{SUMMARY_FIELDS}, bio, followers_count")
                .order("followers_count", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching top users: %s", e)
            raise
        return response.data or []
