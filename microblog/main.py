"""
Microblog - Main Application

FastAPI backend with:
- Supabase for data, auth, profile image storage and realtime
- Cloudinary for post media
- Server-rendered pages (Jinja2) plus a JSON API under /api

Run: uvicorn microblog.main:app --reload
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from microblog.api.routes import api_router
from microblog.core.config import get_settings
from microblog.core.logging import configure_logging
from microblog.db.supabase import test_supabase_connection
from microblog.services.media_service import configure_cloudinary
from microblog.web.pages import router as pages_router

settings = get_settings()
logger = logging.getLogger(__name__)

# Get the package directory
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
STATIC_DIR = os.path.join(PACKAGE_DIR, "web", "static")

# Create FastAPI app
app = FastAPI(
    title="Microblog",
    description="""
    A small social network on top of Supabase.

    ## Features
    - **Feed**: For-you and following timelines, likes, reposts, comments
    - **Compose**: Text posts with an optional image or video (Cloudinary)
    - **People**: Profiles, follow graph, who-to-follow suggestions
    - **Inbox**: Notifications and direct messages, pushed over websockets
    - **Discover**: Trending topics, search, communities, job board
    - **Bookmarks**: Saved posts and collections

    Reads that fail fall back to sample data so pages never render empty.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")

# Server-rendered pages
app.include_router(pages_router)

# Serve static files (for any additional assets)
if os.path.exists(STATIC_DIR):
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Configure logging and the media CDN."""
    configure_logging(settings.log_level)
    if configure_cloudinary():
        logger.info("Cloudinary configured for cloud %s", settings.cloudinary_cloud_name)
    logger.info("Microblog started against %s", settings.supabase_url)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "supabase": "connected" if test_supabase_connection() else "disconnected",
        "cloudinary": "configured" if settings.cloudinary_configured else "not configured",
    }
