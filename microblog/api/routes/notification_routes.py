"""
Notification Routes

GET /notifications - My notifications (unread=true for unread only)
GET /notifications/unread-count - Unread badge count
POST /notifications/read-all - Mark all as read
POST /notifications/{notification_id}/read - Mark one as read
"""

from fastapi import APIRouter, Depends, Query
from supabase import Client

from microblog.core.auth import get_current_user
from microblog.core.errors import http_error
from microblog.db.supabase import get_db
from microblog.schemas.schemas import ActionResponse, NotificationListResponse, UnreadCountResponse
from microblog.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread: bool = False,
    limit: int = Query(50, ge=1, le=100),
    user: dict = Depends(get_current_user),
    db: Client = Depends(get_db),
):
    service = NotificationService(db)
    if not unread:
        return service.notifications_page(user["user_id"], limit=limit)
    try:
        notifications = service.fetch_notifications(user["user_id"], only_unread=True, limit=limit)
    except Exception as e:
        raise http_error(e, "Fetching notifications")
    return NotificationListResponse(notifications=notifications)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        return UnreadCountResponse(count=NotificationService(db).get_unread_notification_count(user["user_id"]))
    except Exception as e:
        raise http_error(e, "Counting notifications")


@router.post("/read-all", response_model=ActionResponse)
async def read_all(user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        NotificationService(db).mark_all_notifications_as_read(user["user_id"])
    except Exception as e:
        raise http_error(e, "Marking notifications")
    return ActionResponse(message="All notifications marked as read")


@router.post("/{notification_id}/read", response_model=ActionResponse)
async def read_one(notification_id: str, user: dict = Depends(get_current_user), db: Client = Depends(get_db)):
    try:
        NotificationService(db).mark_notification_as_read(notification_id)
    except Exception as e:
        raise http_error(e, "Marking notification")
    return ActionResponse(message="Notification marked as read")
