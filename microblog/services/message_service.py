"""
Message Service - direct messages between two users.

Conversations are not stored; they are derived from the messages table by
grouping on the other participant.
"""

import logging
from typing import Callable, List

from supabase import AsyncClient, Client

from microblog.db.supabase import TABLES, subscribe_to_table
from microblog.services import fixtures

logger = logging.getLogger(__name__)

PARTICIPANT_FIELDS = """
    *,
    sender:sender_id (id, username, name, avatar_url),
    receiver:receiver_id (id, username, name, avatar_url)
"""


def group_conversations(user_id: str, messages: List[dict]) -> List[dict]:
    """
    Fold a user's messages into one conversation per counterpart.

    Each conversation keeps the newest message and counts the messages
    received by the user that are still unread. Newest conversation first.
    """
    conversations = {}
    for message in messages:
        outgoing = message["sender_id"] == user_id
        other_id = message["receiver_id"] if outgoing else message["sender_id"]
        other = message.get("receiver") if outgoing else message.get("sender")
        if not other:
            continue

        unread = 1 if message["receiver_id"] == user_id and not message.get("is_read") else 0
        conversation = conversations.get(other_id)
        if conversation is None:
            conversations[other_id] = {
                "user": {
                    "id": other_id,
                    "username": other.get("username"),
                    "name": other.get("name"),
                    "avatar_url": other.get("avatar_url"),
                },
                "last_message": message,
                "unread_count": unread,
            }
            continue
        if message["created_at"] > conversation["last_message"]["created_at"]:
            conversation["last_message"] = message
        conversation["unread_count"] += unread

    return sorted(conversations.values(), key=lambda c: c["last_message"]["created_at"], reverse=True)


class MessageService:

    def __init__(self, client: Client):
        self.client = client

    def _messages(self):
        return self.client.table(TABLES["messages"])

    def fetch_conversations(self, user_id: str) -> dict:
        try:
            response = (
                self._messages()
                .select(PARTICIPANT_FIELDS)
                .or_(f"sender_id.eq.{user_id},receiver_id.eq.{user_id}")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching messages: %s", e)
            return {"conversations": fixtures.fallback_conversations(user_id), "is_fallback": True}
        return {"conversations": group_conversations(user_id, response.data or []), "is_fallback": False}

    def fetch_thread(self, user_id: str, other_id: str) -> dict:
        """Messages between two users, oldest first. Opening a thread reads it."""
        try:
            response = (
                self._messages()
                .select("*")
                .or_(
                    f"and(sender_id.eq.{user_id},receiver_id.eq.{other_id}),"
                    f"and(sender_id.eq.{other_id},receiver_id.eq.{user_id})"
                )
                .order("created_at")
                .execute()
            )
        except Exception as e:
            logger.error("Error fetching thread: %s", e)
            return {"messages": fixtures.fallback_thread(user_id, other_id), "is_fallback": True}

        messages = response.data or []
        unread_ids = [m["id"] for m in messages if m["receiver_id"] == user_id and not m.get("is_read")]
        if unread_ids:
            try:
                self._messages().update({"is_read": True}).in_("id", unread_ids).execute()
                for message in messages:
                    if message["id"] in unread_ids:
                        message["is_read"] = True
            except Exception as e:
                logger.error("Error marking messages as read: %s", e)
        return {"messages": messages, "is_fallback": False}

    def send_message(self, sender_id: str, receiver_id: str, content: str) -> dict:
        content = content.strip()
        if not content:
            raise ValueError("Message cannot be empty")
        if sender_id == receiver_id:
            raise ValueError("You cannot message yourself")
        try:
            response = self._messages().insert({
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "content": content,
                "is_read": False,
            }).execute()
        except Exception as e:
            logger.error("Error sending message: %s", e)
            raise
        return response.data[0]


async def subscribe_to_messages(client: AsyncClient, user_id: str, callback: Callable[[dict], None]):
    """Realtime: messages addressed to this user."""
    return await subscribe_to_table(
        client,
        TABLES["messages"],
        "INSERT",
        callback,
        row_filter=f"receiver_id=eq.{user_id}",
        channel_name=f"messages-{user_id}",
    )
