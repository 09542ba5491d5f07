"""
Explore & Search Routes

GET /explore/trending - Trending topics (limit, default 5)
GET /explore - Explore page data: topics, top users, popular or tagged posts
GET /search - Search posts by text or hashtag
GET /search/suggestions - Typeahead: users, and hashtags for '#' queries
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from supabase import Client

from microblog.core.auth import get_optional_user
from microblog.db.supabase import get_db
from microblog.schemas.schemas import ExploreResponse, SearchResponse, SearchSuggestions, TrendingResponse
from microblog.services.trending_service import (
    TrendingService, explore_data, search_posts_or_samples, search_suggestions
)

explore_router = APIRouter(prefix="/explore", tags=["Explore"])
search_router = APIRouter(prefix="/search", tags=["Search"])


@explore_router.get("/trending", response_model=TrendingResponse)
async def get_trending(limit: int = Query(5, ge=1, le=50), db: Client = Depends(get_db)):
    """Trending topics; the ten sample topics if none can be read."""
    return TrendingService(db).fetch_trending_topics(limit)


@explore_router.get("", response_model=ExploreResponse)
async def get_explore(
    tag: Optional[str] = None,
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    return explore_data(db, user["user_id"] if user else None, tag)


@search_router.get("", response_model=SearchResponse)
async def search(q: str = Query(..., min_length=1), db: Client = Depends(get_db)):
    return SearchResponse(query=q, posts=search_posts_or_samples(db, q)["posts"])


@search_router.get("/suggestions", response_model=SearchSuggestions)
async def suggestions(q: str = "", db: Client = Depends(get_db)):
    return search_suggestions(db, q)
