"""
Bookmark Routes

GET /bookmarks - Saved posts (optionally one collection)
GET /bookmarks/collections - My collections
POST /bookmarks/collections - Create collection
PUT /bookmarks/{bookmark_id}/collection - Move bookmark into a collection
POST /bookmarks/{post_id} - Bookmark a post
DELETE /bookmarks/{post_id} - Remove bookmark
"""

from typing import Optional

from fastapi import APIRouter, Depends
from supabase import Client

from microblog.core.auth import get_current_user
from microblog.core.errors import http_error
from microblog.db.supabase import get_db
from microblog.schemas.schemas import (
    ActionResponse, BookmarkListResponse, BookmarkResponse, CollectionAssign,
    CollectionCreate, CollectionListResponse, CollectionResponse
)
from microblog.services.bookmark_service import BookmarkService

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])


@router.get("", response_model=BookmarkListResponse)
async def list_bookmarks(collection_id: Optional[str] = None, user: dict = Depends(get_current_user),
                         db: Client = Depends(get_db)):
    return BookmarkService(db).list_bookmarks(user["user_id"], collection_id)


# Collection routes are registered before /{post_id} so "collections" is not read as a post id
@router.get("/collections", response_model=CollectionListResponse)
async def list_collections(user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    return BookmarkService(db).list_collections(user["user_id"])


@router.post("/collections", response_model=CollectionResponse, status_code=201)
async def create_collection(data: CollectionCreate, user: dict = Depends(get_current_user),
                            db: Client = Depends(get_db)):
    try:
        return BookmarkService(db).create_collection(user["user_id"], data.name)
    except Exception as e:
        raise http_error(e, "Creating collection")


@router.put("/{bookmark_id}/collection", response_model=BookmarkResponse)
async def assign_collection(bookmark_id: str, data: CollectionAssign, user: dict = Depends(get_current_user),
                            db: Client = Depends(get_db)):
    try:
        return BookmarkService(db).add_to_collection(user["user_id"], bookmark_id, data.collection_id)
    except Exception as e:
        raise http_error(e, "Adding to collection")


@router.post("/{post_id}", response_model=ActionResponse)
async def bookmark_post(post_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        return BookmarkService(db).bookmark_post(user["user_id"], post_id)
    except Exception as e:
        raise http_error(e, "Bookmarking post")


@router.delete("/{post_id}", response_model=ActionResponse)
async def remove_bookmark(post_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        return BookmarkService(db).remove_bookmark(user["user_id"], post_id)
    except Exception as e:
        raise http_error(e, "Removing bookmark")
