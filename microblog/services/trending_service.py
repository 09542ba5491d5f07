"""
Trending Service - trending topics, hashtag lookup and explore/search data.
"""

import logging
from typing import List, Optional

from supabase import Client

from microblog.db.supabase import TABLES
from microblog.services import fixtures
from microblog.services.post_service import PostService
from microblog.services.user_service import UserService

logger = logging.getLogger(__name__)


class TrendingService:

    def __init__(self, client: Client):
        self.client = client

    def fetch_trending_topics(self, limit: int = 5) -> dict:
        """
        Busiest topics first.

        When the read fails or the table is empty the full list of sample
        topics is returned, whatever the limit.
        """
        try:
            topics = (
                self.client.table(TABLES["trending_topics"])
                .select("*")
                .order("posts_count", desc=True)
                .limit(limit)
                .execute()
                .data
            )
        except Exception as e:
            logger.error("Error fetching trending topics: %s", e)
            topics = None

        if not topics:
            return {"topics": [dict(t) for t in fixtures.FALLBACK_TRENDING_TOPICS], "is_fallback": True}
        return {"topics": topics, "is_fallback": False}

    def search_hashtags(self, query: str, limit: int = 2) -> List[dict]:
        term = query.strip().lstrip("#")
        if not term:
            return []
        try:
            response = (
                self.client.table(TABLES["trending_topics"])
                .select("id, tag")
                .ilike("tag", f"%{term}%")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error("Error searching hashtags: %s", e)
            raise
        return response.data or []


def search_suggestions(client: Client, query: str) -> dict:
    """Typeahead for the search box: up to three users, and hashtags for '#' queries."""
    query = query.strip()
    if not query:
        return {"users": [], "hashtags": []}
    try:
        users = UserService(client).search_users(query, limit=3)
        hashtags = TrendingService(client).search_hashtags(query) if query.startswith("#") else []
    except Exception as e:
        logger.error("Error fetching search suggestions: %s", e)
        return {"users": [], "hashtags": []}
    return {"users": users, "hashtags": hashtags}


# ============================================================
# PAGE ASSEMBLY
# ============================================================

EXPLORE_TOPIC_LIMIT = 10
EXPLORE_USER_LIMIT = 5
EXPLORE_POST_LIMIT = 10


def search_posts_or_samples(client: Client, query: str) -> dict:
    """Post search; sample posts with the matching hashtag if the read fails."""
    try:
        return {"posts": PostService(client).search_posts(query), "is_fallback": False}
    except Exception:
        posts = fixtures.filter_posts_by_hashtag(fixtures.generate_posts(), query.strip())
        return {"posts": posts, "is_fallback": True}


def explore_data(client: Client, user_id: Optional[str], tag: Optional[str] = None) -> dict:
    """
    Everything the explore page shows: trending topics, top users and
    popular (or tagged) posts. Each section falls back on its own;
    is_fallback is set if any of them did.
    """
    trending = TrendingService(client).fetch_trending_topics(EXPLORE_TOPIC_LIMIT)
    is_fallback = trending["is_fallback"]
    users_service = UserService(client)

    try:
        users = users_service.top_users(EXPLORE_USER_LIMIT)
    except Exception:
        users, is_fallback = fixtures.FALLBACK_USERS[:EXPLORE_USER_LIMIT], True

    if tag:
        found = search_posts_or_samples(client, tag)
        posts, is_fallback = found["posts"], is_fallback or found["is_fallback"]
    else:
        try:
            posts = PostService(client).fetch_popular_posts(EXPLORE_POST_LIMIT)
        except Exception:
            samples = fixtures.generate_posts()
            posts = sorted(samples, key=lambda p: p["likes_count"], reverse=True)[:EXPLORE_POST_LIMIT]
            is_fallback = True

    following = users_service.follow_status(user_id, [u["id"] for u in users]) if user_id else []
    return {
        "topics": trending["topics"],
        "users": users,
        "posts": posts,
        "following": following,
        "is_fallback": is_fallback,
    }
