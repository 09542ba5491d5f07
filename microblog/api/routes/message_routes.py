"""
Message Routes

GET /messages - My conversations
POST /messages - Send a direct message
GET /messages/{other_id} - Thread with another user (marks it read)
"""

from fastapi import APIRouter, Depends
from supabase import Client

from microblog.core.auth import get_current_user
from microblog.core.errors import http_error
from microblog.db.supabase import get_db
from microblog.schemas.schemas import (
    ConversationListResponse, DirectMessage, MessageCreate, ThreadResponse
)
from microblog.services.message_service import MessageService

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.get("", response_model=ConversationListResponse)
async def list_conversations(user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    return MessageService(db).fetch_conversations(user["user_id"])


@router.post("", response_model=DirectMessage, status_code=201)
async def send_message(data: MessageCreate, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        return MessageService(db).send_message(user["user_id"], data.receiver_id, data.content)
    except Exception as e:
        raise http_error(e, "Sending message")


@router.get("/{other_id}", response_model=ThreadResponse)
async def get_thread(other_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    return MessageService(db).fetch_thread(user["user_id"], other_id)
