"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from microblog.api.routes.auth_routes import router as auth_router
from microblog.api.routes.post_routes import router as post_router
from microblog.api.routes.user_routes import router as user_router
from microblog.api.routes.notification_routes import router as notification_router
from microblog.api.routes.message_routes import router as message_router
from microblog.api.routes.bookmark_routes import router as bookmark_router
from microblog.api.routes.community_routes import router as community_router
from microblog.api.routes.job_routes import router as job_router
from microblog.api.routes.explore_routes import explore_router, search_router
from microblog.api.routes.realtime_routes import router as realtime_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(post_router)
api_router.include_router(user_router)
api_router.include_router(notification_router)
api_router.include_router(message_router)
api_router.include_router(bookmark_router)
api_router.include_router(community_router)
api_router.include_router(job_router)
api_router.include_router(explore_router)
api_router.include_router(search_router)
api_router.include_router(realtime_router)
