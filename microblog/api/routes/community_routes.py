"""
Community Routes

GET /communities - Discover / my communities
POST /communities/{community_id}/join - Join
DELETE /communities/{community_id}/join - Leave
"""

from typing import Optional

from fastapi import APIRouter, Depends
from supabase import Client

from microblog.core.auth import get_current_user, get_optional_user
from microblog.core.errors import http_error
from microblog.db.supabase import get_db
from microblog.schemas.schemas import ActionResponse, CommunityListResponse
from microblog.services.community_service import CommunityService

router = APIRouter(prefix="/communities", tags=["Communities"])


@router.get("", response_model=CommunityListResponse)
async def list_communities(user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    return CommunityService(db).list_communities(user["user_id"] if user else None)


@router.post("/{community_id}/join", response_model=ActionResponse)
async def join(community_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        return CommunityService(db).join_community(user["user_id"], community_id)
    except Exception as e:
        raise http_error(e, "Joining community")


@router.delete("/{community_id}/join", response_model=ActionResponse)
async def leave(community_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        return CommunityService(db).leave_community(user["user_id"], community_id)
    except Exception as e:
        raise http_error(e, "Leaving community")
