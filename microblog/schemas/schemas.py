"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Row shapes mirror the Supabase tables; unknown columns are ignored.
"""

from pydantic import AliasChoices, BaseModel, EmailStr, Field
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum

# Supabase ids are uuids, fixture and seeded tables sometimes use ints
RecordId = Union[int, str]


# ============================================================
# ENUMS
# ============================================================

class NotificationType(str, Enum):
    like = "like"
    comment = "comment"
    follow = "follow"
    repost = "repost"
    mention = "mention"


class MediaType(str, Enum):
    image = "image"
    video = "video"


class ImageLayout(str, Enum):
    original = "original"
    wide = "wide"
    square = "square"


class FeedTab(str, Enum):
    for_you = "for-you"
    following = "following"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    username: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    username: Optional[str] = None

class SessionUser(BaseModel):
    user_id: str
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None


# ============================================================
# USER SCHEMAS
# ============================================================

class UserSummary(BaseModel):
    id: RecordId
    username: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

class UserProfile(UserSummary):
    email: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    cover_url: Optional[str] = None
    followers_count: int = 0
    following_count: int = 0
    created_at: Optional[datetime] = None

class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, min_length=1, max_length=50)
    bio: Optional[str] = Field(None, max_length=300)
    location: Optional[str] = None
    website: Optional[str] = None

class FollowStatusResponse(BaseModel):
    user_id: RecordId
    is_following: bool

class SuggestionsResponse(BaseModel):
    users: List[UserProfile]
    following: List[RecordId] = []


# ============================================================
# POST SCHEMAS
# ============================================================

class PostResponse(BaseModel):
    id: RecordId
    user_id: RecordId
    content: Optional[str] = ""
    media_urls: Optional[List[str]] = None
    media_types: Optional[List[str]] = None
    location: Optional[str] = None
    scheduled_for: Optional[datetime] = None
    likes_count: int = 0
    reposts_count: int = 0
    comments_count: int = 0
    views_count: int = 0
    is_repost: bool = False
    original_post_id: Optional[RecordId] = None
    hashtags: List[str] = []
    created_at: Optional[datetime] = None
    author: Optional[UserSummary] = Field(None, validation_alias=AliasChoices("author", "users"))

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)

class CommentResponse(BaseModel):
    id: RecordId
    post_id: RecordId
    user_id: RecordId
    content: str
    likes_count: int = 0
    created_at: Optional[datetime] = None
    author: Optional[UserSummary] = Field(None, validation_alias=AliasChoices("author", "users"))

class PostDetailResponse(PostResponse):
    comments: List[CommentResponse] = []

class FeedResponse(BaseModel):
    posts: List[PostResponse]
    page: int = 0
    has_more: bool = True
    is_fallback: bool = False

class SearchResponse(BaseModel):
    query: str
    posts: List[PostResponse]


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationResponse(BaseModel):
    id: RecordId
    user_id: RecordId
    actor_id: Optional[RecordId] = None
    type: NotificationType
    post_id: Optional[RecordId] = None
    comment_id: Optional[RecordId] = None
    seen: bool = False
    created_at: Optional[datetime] = None
    actor: Optional[UserSummary] = None
    post: Optional[dict] = None
    comment: Optional[dict] = None

class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    is_fallback: bool = False

class UnreadCountResponse(BaseModel):
    count: int


# ============================================================
# MESSAGE SCHEMAS
# ============================================================

class MessageCreate(BaseModel):
    receiver_id: str
    content: str = Field(..., max_length=1000)

class DirectMessage(BaseModel):
    id: RecordId
    sender_id: RecordId
    receiver_id: RecordId
    content: str
    is_read: bool = False
    created_at: Optional[datetime] = None

class ConversationResponse(BaseModel):
    user: UserSummary
    last_message: DirectMessage
    unread_count: int = 0

class ConversationListResponse(BaseModel):
    conversations: List[ConversationResponse]
    is_fallback: bool = False

class ThreadResponse(BaseModel):
    messages: List[DirectMessage]
    is_fallback: bool = False


# ============================================================
# BOOKMARK SCHEMAS
# ============================================================

class BookmarkResponse(BaseModel):
    id: RecordId
    user_id: RecordId
    post_id: RecordId
    collection_id: Optional[RecordId] = None
    created_at: Optional[datetime] = None
    post: Optional[PostResponse] = Field(None, validation_alias=AliasChoices("post", "posts"))

class BookmarkListResponse(BaseModel):
    bookmarks: List[BookmarkResponse]
    is_fallback: bool = False

class CollectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

class CollectionAssign(BaseModel):
    collection_id: str

class CollectionResponse(BaseModel):
    id: RecordId
    user_id: RecordId
    name: str
    post_count: int = 0
    created_at: Optional[datetime] = None

class CollectionListResponse(BaseModel):
    collections: List[CollectionResponse]
    is_fallback: bool = False


# ============================================================
# COMMUNITY / JOB / TRENDING SCHEMAS
# ============================================================

class CommunityResponse(BaseModel):
    id: RecordId
    name: str
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    cover_url: Optional[str] = None
    member_count: int = 0
    is_private: bool = False
    is_member: bool = False

class CommunityListResponse(BaseModel):
    discover: List[CommunityResponse]
    mine: List[CommunityResponse]
    is_fallback: bool = False

class JobResponse(BaseModel):
    id: RecordId
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    salary: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None
    posted: Optional[str] = None

class JobBoardResponse(BaseModel):
    featured: Optional[JobResponse] = None
    jobs: List[JobResponse]

class TrendingTopic(BaseModel):
    id: RecordId
    tag: str
    posts_count: int = 0
    category: Optional[str] = None
    image_url: Optional[str] = None

class TrendingResponse(BaseModel):
    topics: List[TrendingTopic]
    is_fallback: bool = False

class SearchSuggestions(BaseModel):
    users: List[UserSummary] = []
    hashtags: List[TrendingTopic] = []

class ExploreResponse(BaseModel):
    topics: List[TrendingTopic]
    users: List[UserProfile]
    posts: List[PostResponse]
    following: List[RecordId] = []
    is_fallback: bool = False


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class ActionResponse(BaseModel):
    success: bool = True
    message: str
    requires_auth: bool = False
    id: Optional[RecordId] = None

class ErrorResponse(BaseModel):
    detail: str
