"""
Supabase Connection Utility

Supabase owns everything durable:
- Postgres tables (users, posts, follows, likes, ...)
- Auth (sign-in/sign-up/sessions)
- Storage (profile avatars and covers)
- Realtime (row change subscriptions)

This module only hands out clients and wraps the realtime plumbing.
"""

import logging
from typing import Any, Callable, Optional
from uuid import uuid4

from supabase import AsyncClient, Client, ClientOptions, acreate_client, create_client

from microblog.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Global clients (the SDK keeps its own HTTP connection pool)
_client: Client = None
_async_client: AsyncClient = None


# Table name constants (avoid typos)
TABLES = {
    "users": "users",
    "posts": "posts",
    "follows": "follows",
    "likes": "likes",
    "comments": "comments",
    "notifications": "notifications",
    "messages": "messages",
    "bookmarks": "bookmarks",
    "bookmark_collections": "bookmark_collections",
    "communities": "communities",
    "community_members": "community_members",
    "jobs": "jobs",
    "trending_topics": "trending_topics",
}

# Select fragment for the embedded post author
AUTHOR_FIELDS = "users:user_id (id, name, username, avatar_url)"


def get_supabase_client() -> Client:
    """Get or create the Supabase client (singleton pattern)"""
    global _client
    if _client is None:
        logger.info("Creating Supabase client for %s", settings.supabase_url)
        _client = create_client(settings.supabase_url, settings.supabase_key)
    return _client


def get_db() -> Client:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/posts")
        async def list_posts(db: Client = Depends(get_db)):
            ...
    """
    return get_supabase_client()


def create_auth_client() -> Client:
    """
    Fresh client for sign-in/sign-up/sign-out.

    Sessions are never persisted on the shared client; the access token
    travels with each request instead.
    """
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


async def get_async_supabase_client() -> AsyncClient:
    """Async client, needed for realtime channels."""
    global _async_client
    if _async_client is None:
        _async_client = await acreate_client(settings.supabase_url, settings.supabase_key)
    return _async_client


def test_supabase_connection() -> bool:
    """
    Test if Supabase is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_supabase_client()
        client.table(TABLES["users"]).select("id").limit(1).execute()
        return True
    except Exception as e:
        logger.error("Supabase connection failed: %s", e)
        return False


def first_row(response) -> Optional[dict]:
    """First row of a query response, or None."""
    if response is None or not response.data:
        return None
    return response.data[0]


# ============================================================
# REALTIME
# ============================================================

def extract_record(payload: Any) -> Optional[dict]:
    """
    Pull the new row out of a postgres-changes payload.

    Payloads arrive either as {"new": {...}} or nested under
    {"data": {"record": {...}}} depending on the realtime client version.
    """
    if not isinstance(payload, dict):
        return None
    if isinstance(payload.get("new"), dict):
        return payload["new"]
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    if isinstance(payload.get("record"), dict):
        return payload["record"]
    return None


async def subscribe_to_table(
    client: AsyncClient,
    table: str,
    event: str,
    callback: Callable[[dict], None],
    row_filter: Optional[str] = None,
    channel_name: Optional[str] = None,
):
    """
    Attach a callback to row changes on a public table.

    The callback receives the changed row only. Each call gets a topic of
    its own (the client keeps one channel per topic). Returns the channel
    so the caller can remove it with client.remove_channel(channel).
    """
    def on_change(payload):
        record = extract_record(payload)
        if record is not None:
            callback(record)

    topic = f"{channel_name or table + '-changes'}-{uuid4().hex}"
    channel = client.channel(topic)
    channel.on_postgres_changes(
        event,
        schema="public",
        table=table,
        filter=row_filter,
        callback=on_change,
    )
    await channel.subscribe()
    logger.info("Subscribed to %s %s events", table, event)
    return channel
