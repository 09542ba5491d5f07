"""
User Routes

GET /users/suggestions - Who to follow
GET /users/search - Search users by username or name
PUT /users/me - Update own profile
POST /users/me/avatar - Upload avatar image
POST /users/me/cover - Upload cover image
GET /users/{username} - Public profile
GET /users/{username}/posts - Posts by user
GET /users/{username}/followers - Followers
GET /users/{username}/following - Following
GET /users/{user_id}/follow - Am I following this user
POST /users/{user_id}/follow - Follow user
DELETE /users/{user_id}/follow - Unfollow user
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from supabase import Client

from microblog.core.auth import get_current_user, get_optional_user
from microblog.core.config import get_settings
from microblog.core.errors import http_error
from microblog.db.supabase import get_db
from microblog.schemas.schemas import (
    ActionResponse, FollowStatusResponse, PostResponse, ProfileUpdate,
    SuggestionsResponse, UserProfile, UserSummary
)
from microblog.services.post_service import PostService
from microblog.services.user_service import UserService
from microblog.utils.file_upload import read_media_file

settings = get_settings()

router = APIRouter(prefix="/users", tags=["Users"])


def _require_user(service: UserService, username: str) -> dict:
    try:
        profile = service.fetch_user_by_username(username)
    except Exception as e:
        raise http_error(e, "Fetching user")
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.get("/suggestions", response_model=SuggestionsResponse)
async def get_suggestions(user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    user_id = user["user_id"] if user else None
    service = UserService(db)
    users = service.suggest_users(user_id)
    following = service.follow_status(user_id, [u["id"] for u in users]) if user_id else []
    return SuggestionsResponse(users=users, following=following)


@router.get("/search", response_model=List[UserSummary])
async def search_users(q: str = Query(..., min_length=1), limit: int = Query(3, ge=1, le=20),
                       db: Client = Depends(get_db)):
    try:
        return UserService(db).search_users(q, limit=limit)
    except Exception as e:
        raise http_error(e, "Searching users")


@router.put("/me", response_model=UserProfile)
async def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user),
                         db: Client = Depends(get_db)):
    """Update own profile. Username must be unique and contain no spaces."""
    try:
        return UserService(db).update_user_profile(user["user_id"], **data.model_dump())
    except Exception as e:
        raise http_error(e, "Updating profile")


async def _upload_profile_image(kind: str, file: UploadFile, user: dict, db: Client) -> ActionResponse:
    media = await read_media_file(file)
    if media is None:
        raise HTTPException(status_code=400, detail="No file provided")
    data, _, content_type = media
    try:
        url = UserService(db).upload_profile_image(user["user_id"], kind, data, content_type)
    except Exception as e:
        raise http_error(e, f"Uploading {kind}")
    return ActionResponse(message=url)


@router.post("/me/avatar", response_model=ActionResponse)
async def upload_avatar(file: UploadFile = File(...), user: dict = Depends(get_current_user),
                        db: Client = Depends(get_db)):
    """Upload avatar image. The message carries the public URL."""
    return await _upload_profile_image("avatar", file, user, db)


@router.post("/me/cover", response_model=ActionResponse)
async def upload_cover(file: UploadFile = File(...), user: dict = Depends(get_current_user),
                       db: Client = Depends(get_db)):
    return await _upload_profile_image("cover", file, user, db)


@router.get("/{username}", response_model=UserProfile)
async def get_profile(username: str, db: Client = Depends(get_db)):
    return _require_user(UserService(db), username)


@router.get("/{username}/posts", response_model=List[PostResponse])
async def get_user_posts(username: str, page: int = Query(0, ge=0), db: Client = Depends(get_db)):
    try:
        posts = PostService(db).fetch_user_posts(username, settings.feed_page_size, page)
    except Exception as e:
        raise http_error(e, "Fetching user posts")
    if posts is None:
        raise HTTPException(status_code=404, detail="User not found")
    return posts


@router.get("/{username}/followers", response_model=List[UserSummary])
async def get_followers(username: str, db: Client = Depends(get_db)):
    service = UserService(db)
    profile = _require_user(service, username)
    try:
        return service.get_user_followers(profile["id"])
    except Exception as e:
        raise http_error(e, "Fetching followers")


@router.get("/{username}/following", response_model=List[UserSummary])
async def get_following(username: str, db: Client = Depends(get_db)):
    service = UserService(db)
    profile = _require_user(service, username)
    try:
        return service.get_user_following(profile["id"])
    except Exception as e:
        raise http_error(e, "Fetching following")


@router.get("/{user_id}/follow", response_model=FollowStatusResponse)
async def get_follow_status(user_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        following = UserService(db).is_following(user["user_id"], user_id)
    except Exception as e:
        raise http_error(e, "Checking follow status")
    return FollowStatusResponse(user_id=user_id, is_following=following)


@router.post("/{user_id}/follow", response_model=ActionResponse)
async def follow(user_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        result = UserService(db).follow_user(user["user_id"], user_id)
    except Exception as e:
        raise http_error(e, "Following user")
    if result.get("already_following"):
        return ActionResponse(message="Already following")
    return ActionResponse(message="User followed successfully")


@router.delete("/{user_id}/follow", response_model=ActionResponse)
async def unfollow(user_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        result = UserService(db).unfollow_user(user["user_id"], user_id)
    except Exception as e:
        raise http_error(e, "Unfollowing user")
    if result.get("not_following"):
        return ActionResponse(message="Not following")
    return ActionResponse(message="User unfollowed successfully")
