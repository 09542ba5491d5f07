"""
Page Routes - server-rendered HTML (Jinja2).

GET  /                              - Home feed (tab, page), trending panel, who to follow
GET  /login, POST /login            - Login form, sets the session cookie
GET  /signup, POST /signup          - Signup form
GET  /logout                        - Clear the session cookie
GET  /compose, POST /compose        - Compose form
GET  /explore                       - Trending topics, top users, popular posts
GET  /search                        - Post search
GET  /notifications                 - Notifications (marks them read)
GET  /messages                      - Conversations
GET  /messages/{other_id}, POST     - Thread / send
GET  /bookmarks                     - Saved posts
GET  /communities, POST .../join|leave
GET  /jobs                          - Job board
GET  /profile/{username}            - Profile and posts
GET  /profile/{username}/followers|following
GET  /settings/profile, POST        - Edit profile

Protected pages redirect guests to /login.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from supabase import Client

from microblog.core.auth import clear_session_cookie, get_optional_user, set_session_cookie
from microblog.core.config import get_settings
from microblog.db.supabase import get_db
from microblog.schemas.schemas import FeedTab, ImageLayout
from microblog.services import fixtures, media_service
from microblog.services.auth_service import AuthService, get_auth_service
from microblog.services.bookmark_service import BookmarkService
from microblog.services.community_service import CommunityService
from microblog.services.job_service import JobService
from microblog.services.message_service import MessageService
from microblog.services.notification_service import NotificationService
from microblog.services.post_service import PostService
from microblog.services.share_service import share_post
from microblog.services.trending_service import TrendingService, explore_data, search_posts_or_samples
from microblog.services.user_service import UserService
from microblog.utils.file_upload import read_media_file

logger = logging.getLogger(__name__)
settings = get_settings()

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["image_url"] = media_service.image_url
templates.env.globals["video_url"] = media_service.video_url
templates.env.globals["placeholder_url"] = media_service.placeholder_url

TRENDING_PANEL_LIMIT = 5
LAYOUTS = [option.value for option in ImageLayout]
JOB_TYPES = ["All", "Full-time", "Part-time", "Contract", "Remote"]

router = APIRouter(tags=["Pages"])


def render(request: Request, name: str, user: Optional[dict], status_code: int = 200, **context):
    context["user"] = user
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def to_login() -> RedirectResponse:
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


# ============================================================
# HOME
# ============================================================

@router.get("/")
async def home(
    request: Request,
    tab: FeedTab = FeedTab.for_you,
    page: int = Query(0, ge=0),
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    user_id = user["user_id"] if user else None
    users = UserService(db)
    suggestions = users.suggest_users(user_id)
    return render(
        request, "home.html", user,
        tab=tab.value,
        feed=PostService(db).home_feed(user_id, tab, page, settings.feed_page_size),
        trending=TrendingService(db).fetch_trending_topics(TRENDING_PANEL_LIMIT),
        suggestions=suggestions,
        following=users.follow_status(user_id, [u["id"] for u in suggestions]) if user_id else [],
    )


# ============================================================
# AUTH
# ============================================================

@router.get("/login")
async def login_page(request: Request, user: Optional[dict] = Depends(get_optional_user)):
    if user:
        return redirect("/")
    return render(request, "login.html", None)


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        result = auth.sign_in(email, password)
    except Exception:
        return render(request, "login.html", None, status_code=400,
                      error="Invalid email or password", email=email)

    response = redirect("/")
    set_session_cookie(response, result["access_token"])
    return response


@router.get("/signup")
async def signup_page(request: Request):
    return render(request, "signup.html", None)


@router.post("/signup")
async def signup(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    username: str = Form(...),
    name: str = Form(...),
    auth: AuthService = Depends(get_auth_service),
):
    form = {"email": email, "username": username, "name": name}
    if len(password) < 6:
        return render(request, "signup.html", None, status_code=400,
                      error="Password must be at least 6 characters", form=form)
    try:
        result = auth.sign_up(email, password, username, name)
    except ValueError as e:
        return render(request, "signup.html", None, status_code=400, error=str(e), form=form)
    except Exception as e:
        return render(request, "signup.html", None, status_code=400, error=f"Sign up failed: {e}", form=form)

    if not result["access_token"]:
        return render(request, "login.html", None, message="Check your email to confirm your account", email=email)
    response = redirect("/")
    set_session_cookie(response, result["access_token"])
    return response


@router.get("/logout")
async def logout(user: Optional[dict] = Depends(get_optional_user), auth: AuthService = Depends(get_auth_service)):
    if user:
        try:
            auth.sign_out(user["access_token"])
        except Exception as e:
            logger.warning("Remote sign out failed: %s", e)
    response = to_login()
    clear_session_cookie(response)
    return response


# ============================================================
# COMPOSE
# ============================================================

@router.get("/compose")
async def compose_page(request: Request, user: Optional[dict] = Depends(get_optional_user)):
    if not user:
        return to_login()
    return render(request, "compose.html", user, layouts=LAYOUTS)


@router.post("/compose")
async def compose(
    request: Request,
    content: str = Form(""),
    layout: ImageLayout = Form(ImageLayout.original),
    sensitive: bool = Form(False),
    location: Optional[str] = Form(None),
    schedule_date: Optional[str] = Form(None),
    media: Optional[UploadFile] = File(None),
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    if not user:
        return to_login()

    def form_error(message: str):
        return render(request, "compose.html", user, status_code=400,
                      layouts=LAYOUTS,
                      message=message, content=content, location=location)

    try:
        file = await read_media_file(media)
    except HTTPException as e:
        return form_error(e.detail)

    scheduled = None
    if schedule_date:
        try:
            scheduled = datetime.fromisoformat(schedule_date)
        except ValueError:
            return form_error("Invalid schedule date")

    result = share_post(
        PostService(db), user, content,
        media=file, layout=layout, sensitive=sensitive,
        location=location, schedule_date=scheduled,
    )
    if not result["success"]:
        return form_error(result["message"])
    return redirect("/")


# ============================================================
# EXPLORE / SEARCH
# ============================================================

@router.get("/explore")
async def explore(
    request: Request,
    tag: Optional[str] = None,
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    data = explore_data(db, user["user_id"] if user else None, tag)
    return render(request, "explore.html", user, tag=tag, **data)


@router.get("/search")
async def search(
    request: Request,
    q: str = "",
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    results = search_posts_or_samples(db, q) if q.strip() else {"posts": [], "is_fallback": False}
    return render(request, "search.html", user, query=q, **results)


# ============================================================
# NOTIFICATIONS / MESSAGES / BOOKMARKS
# ============================================================

@router.get("/notifications")
async def notifications(request: Request, user: Optional[dict] = Depends(get_optional_user),
                        db: Client = Depends(get_db)):
    if not user:
        return to_login()
    service = NotificationService(db)
    page = service.notifications_page(user["user_id"])
    if not page["is_fallback"]:
        try:
            service.mark_all_notifications_as_read(user["user_id"])
        except Exception as e:
            logger.warning("Notifications left unread: %s", e)
    return render(request, "notifications.html", user, **page)


@router.get("/messages")
async def messages(request: Request, user: Optional[dict] = Depends(get_optional_user),
                   db: Client = Depends(get_db)):
    if not user:
        return to_login()
    data = MessageService(db).fetch_conversations(user["user_id"])
    return render(request, "messages.html", user, other=None, thread=None, **data)


def _thread_page(request: Request, user: dict, db: Client, other_id: str,
                 status_code: int = 200, error: Optional[str] = None):
    service = MessageService(db)
    conversations = service.fetch_conversations(user["user_id"])
    thread = service.fetch_thread(user["user_id"], other_id)
    return render(request, "messages.html", user, status_code=status_code, other=other_id, thread=thread,
                  error=error, **conversations)


@router.get("/messages/{other_id}")
async def thread(request: Request, other_id: str, user: Optional[dict] = Depends(get_optional_user),
                 db: Client = Depends(get_db)):
    if not user:
        return to_login()
    return _thread_page(request, user, db, other_id)


@router.post("/messages/{other_id}")
async def send_message(request: Request, other_id: str, content: str = Form(""),
                       user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    if not user:
        return to_login()
    try:
        MessageService(db).send_message(user["user_id"], other_id, content)
    except ValueError as e:
        return _thread_page(request, user, db, other_id, status_code=400, error=str(e))
    except Exception as e:
        logger.error("Message not sent: %s", e)
        return _thread_page(request, user, db, other_id, status_code=500, error=f"Failed to send message: {e}")
    return redirect(f"/messages/{other_id}")


@router.get("/bookmarks")
async def bookmarks(request: Request, collection_id: Optional[str] = None,
                    user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    if not user:
        return to_login()
    service = BookmarkService(db)
    saved = service.list_bookmarks(user["user_id"], collection_id)
    collections = service.list_collections(user["user_id"])
    return render(request, "bookmarks.html", user, bookmarks=saved["bookmarks"],
                  collections=collections["collections"], collection_id=collection_id,
                  is_fallback=saved["is_fallback"])


# ============================================================
# COMMUNITIES / JOBS
# ============================================================

@router.get("/communities")
async def communities(request: Request, user: Optional[dict] = Depends(get_optional_user),
                      db: Client = Depends(get_db)):
    data = CommunityService(db).list_communities(user["user_id"] if user else None)
    return render(request, "communities.html", user, **data)


@router.post("/communities/{community_id}/{action}")
async def community_action(request: Request, community_id: str, action: str,
                           user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    if not user:
        return to_login()
    if action not in ("join", "leave"):
        raise HTTPException(status_code=404, detail="Unknown action")
    service = CommunityService(db)
    try:
        if action == "join":
            service.join_community(user["user_id"], community_id)
        else:
            service.leave_community(user["user_id"], community_id)
    except Exception as e:
        logger.error("Community %s failed: %s", action, e)
        data = service.list_communities(user["user_id"])
        return render(request, "communities.html", user, status_code=500,
                      error=f"Failed to {action} community: {e}", **data)
    return redirect("/communities")


@router.get("/jobs")
async def jobs(request: Request, type: str = "All", user: Optional[dict] = Depends(get_optional_user),
               db: Client = Depends(get_db)):
    board = JobService(db).list_jobs(type)
    return render(request, "jobs.html", user, job_types=JOB_TYPES, selected_type=type, **board)


# ============================================================
# PROFILE
# ============================================================

def _profile_or_404(db: Client, username: str) -> dict:
    try:
        profile = UserService(db).fetch_user_by_username(username)
    except Exception as e:
        logger.error("Profile lookup failed, trying sample accounts: %s", e)
        profile = next((u for u in fixtures.FALLBACK_USERS if u["username"] == username), None)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.get("/profile/{username}")
async def profile(request: Request, username: str, page: int = Query(0, ge=0),
                  user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    owner = _profile_or_404(db, username)
    posts = PostService(db).profile_posts(owner, settings.feed_page_size, page)
    is_following = False
    if user and user["user_id"] != owner["id"]:
        try:
            is_following = UserService(db).is_following(user["user_id"], owner["id"])
        except Exception:
            is_following = False
    return render(request, "profile.html", user, profile=owner, posts=posts["posts"], page=page,
                  is_fallback=posts["is_fallback"],
                  is_following=is_following, is_self=bool(user and user["user_id"] == owner["id"]))


@router.get("/profile/{username}/{relation}")
async def follow_list(request: Request, username: str, relation: str,
                      user: Optional[dict] = Depends(get_optional_user), db: Client = Depends(get_db)):
    if relation not in ("followers", "following"):
        raise HTTPException(status_code=404, detail="Not found")
    owner = _profile_or_404(db, username)
    service = UserService(db)
    try:
        if relation == "followers":
            people = service.get_user_followers(owner["id"])
        else:
            people = service.get_user_following(owner["id"])
    except Exception:
        people = []
    return render(request, "follow_list.html", user, profile=owner, relation=relation, people=people)


@router.get("/settings/profile")
async def settings_page(request: Request, user: Optional[dict] = Depends(get_optional_user),
                        db: Client = Depends(get_db)):
    if not user:
        return to_login()
    try:
        profile = UserService(db).fetch_user_by_id(user["user_id"]) or {}
    except Exception:
        profile = {}
    return render(request, "settings_profile.html", user, profile=profile)


@router.post("/settings/profile")
async def save_settings(
    request: Request,
    name: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover: Optional[UploadFile] = File(None),
    user: Optional[dict] = Depends(get_optional_user),
    db: Client = Depends(get_db),
):
    if not user:
        return to_login()
    service = UserService(db)
    # Blank name/username mean "unchanged"; the other fields may be cleared
    fields = {
        "name": (name or "").strip() or None,
        "username": (username or "").strip() or None,
        "bio": bio,
        "location": location,
        "website": website,
    }
    profile = dict(fields)
    try:
        for kind, upload in (("avatar", avatar), ("cover", cover)):
            media = await read_media_file(upload)
            if media:
                data, _, content_type = media
                profile[f"{kind}_url"] = service.upload_profile_image(user["user_id"], kind, data, content_type)
        if any(value is not None for value in fields.values()):
            profile = service.update_user_profile(user["user_id"], **fields)
    except HTTPException as e:
        return render(request, "settings_profile.html", user, status_code=400, profile=profile, error=e.detail)
    except ValueError as e:
        return render(request, "settings_profile.html", user, status_code=400, profile=profile, error=str(e))
    except Exception as e:
        return render(request, "settings_profile.html", user, status_code=500, profile=profile,
                      error=f"Failed to update profile: {e}")
    return render(request, "settings_profile.html", user, profile=profile, message="Profile updated")
