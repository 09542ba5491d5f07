"""
Realtime Routes - relay Supabase row inserts to the browser.

WS /ws/posts - every new post
WS /ws/notifications?token=... - new notifications for the token's user
WS /ws/messages?token=... - new messages addressed to the token's user

Browsers can't set an Authorization header on a websocket, so the access
token comes as a query parameter (or the session cookie).
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from microblog.core.auth import decode_token, user_from_claims
from microblog.core.config import get_settings
from microblog.db.supabase import TABLES, get_async_supabase_client, subscribe_to_table
from microblog.services.message_service import subscribe_to_messages
from microblog.services.notification_service import subscribe_to_notifications

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/ws", tags=["Realtime"])

Subscribe = Callable[[object, Callable[[dict], None]], Awaitable[object]]


def websocket_user(websocket: WebSocket, token: Optional[str]) -> Optional[dict]:
    token = token or websocket.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    payload = decode_token(token)
    return user_from_claims(payload, token) if payload else None


async def relay(websocket: WebSocket, subscribe: Subscribe, client_factory=None) -> None:
    """
    Forward every row the subscription delivers to the websocket until the
    browser goes away, then drop the channel.
    """
    client = await (client_factory or get_async_supabase_client)()
    queue: asyncio.Queue = asyncio.Queue()
    channel = await subscribe(client, queue.put_nowait)

    async def forward():
        while True:
            record = await queue.get()
            await websocket.send_json(record)

    forwarder = asyncio.create_task(forward())
    try:
        # Incoming frames are ignored; receiving is how a disconnect is noticed
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        forwarder.cancel()
        await client.remove_channel(channel)
        logger.info("Realtime relay closed")


@router.websocket("/posts")
async def posts_feed(websocket: WebSocket):
    await websocket.accept()

    async def subscribe(client, callback):
        return await subscribe_to_table(client, TABLES["posts"], "INSERT", callback, channel_name="posts-feed")

    await relay(websocket, subscribe)


@router.websocket("/notifications")
async def notifications_feed(websocket: WebSocket, token: Optional[str] = None):
    user = websocket_user(websocket, token)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()

    async def subscribe(client, callback):
        return await subscribe_to_notifications(client, user["user_id"], callback)

    await relay(websocket, subscribe)


@router.websocket("/messages")
async def messages_feed(websocket: WebSocket, token: Optional[str] = None):
    user = websocket_user(websocket, token)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()

    async def subscribe(client, callback):
        return await subscribe_to_messages(client, user["user_id"], callback)

    await relay(websocket, subscribe)
