"""
Post Routes

GET /posts/feed - Home feed (tab=for-you|following, page)
POST /posts - Share a post (multipart form, optional media file)
GET /posts/{post_id} - Post with comments
POST /posts/{post_id}/like - Like a post
DELETE /posts/{post_id}/like - Unlike a post
POST /posts/{post_id}/repost - Repost
POST /posts/{post_id}/comments - Comment on a post
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from supabase import Client

from microblog.core.auth import get_current_user, get_optional_user
from microblog.core.config import get_settings
from microblog.core.errors import http_error
from microblog.db.supabase import get_db
from microblog.schemas.schemas import (
    ActionResponse, CommentCreate, CommentResponse, FeedResponse, FeedTab,
    ImageLayout, PostDetailResponse, PostResponse
)
from microblog.services.post_service import PostService
from microblog.services.share_service import share_post
from microblog.utils.file_upload import read_media_file

settings = get_settings()

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("/feed", response_model=FeedResponse)
async def get_feed(
    tab: FeedTab = FeedTab.for_you,
    page: int = Query(0, ge=0),
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    """Home feed. Sample posts are served (is_fallback) when the feed can't be read."""
    user_id = user["user_id"] if user else None
    return PostService(db).home_feed(user_id, tab, page, settings.feed_page_size)


@router.post("", response_model=ActionResponse)
async def create_post(
    content: str = Form(""),
    layout: ImageLayout = Form(ImageLayout.original),
    sensitive: bool = Form(False),
    location: Optional[str] = Form(None),
    schedule_date: Optional[datetime] = Form(None),
    media: Optional[UploadFile] = File(None),
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    """
    Share a post. Failures come back as success=false with a message,
    the same way the compose form shows them.
    """
    file = await read_media_file(media) if user else None
    return share_post(
        PostService(db), user, content,
        media=file, layout=layout, sensitive=sensitive,
        location=location, schedule_date=schedule_date,
    )


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(post_id: str, db: Client = Depends(get_db)):
    try:
        post = PostService(db).fetch_post(post_id)
    except Exception as e:
        raise http_error(e, "Fetching post")
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("/{post_id}/like", response_model=ActionResponse)
async def like_post(post_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        result = PostService(db).like_post(user["user_id"], post_id)
    except Exception as e:
        raise http_error(e, "Liking post")
    if result.get("already_liked"):
        return ActionResponse(message="Post already liked")
    return ActionResponse(message="Post liked successfully")


@router.delete("/{post_id}/like", response_model=ActionResponse)
async def unlike_post(post_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        result = PostService(db).unlike_post(user["user_id"], post_id)
    except Exception as e:
        raise http_error(e, "Unliking post")
    return ActionResponse(message=result["message"])


@router.post("/{post_id}/repost", response_model=PostResponse, status_code=201)
async def repost(post_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        post = PostService(db).repost_post(user["user_id"], post_id)
    except Exception as e:
        raise http_error(e, "Reposting")
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    post_id: str,
    data: CommentCreate,
    user: dict = Depends(get_current_user),
    db: Client = Depends(get_db),
):
    try:
        return PostService(db).add_comment(user["user_id"], post_id, data.content)
    except Exception as e:
        raise http_error(e, "Adding comment")
