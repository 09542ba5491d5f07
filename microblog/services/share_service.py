"""
Share Service - the compose form's submit action.

Validates, uploads the optional media file, then creates the post. Never
raises: every outcome is an ActionResponse-shaped dict for the form.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Tuple

from microblog.schemas.schemas import ImageLayout
from microblog.services import media_service
from microblog.services.post_service import PostService

logger = logging.getLogger(__name__)

EMPTY_POST_MESSAGE = "Please add some text or media to your post"


def share_post(
    posts: PostService,
    user: Optional[dict],
    content: str,
    media: Optional[Tuple[bytes, str, str]] = None,
    layout: ImageLayout = ImageLayout.original,
    sensitive: bool = False,
    location: Optional[str] = None,
    schedule_date: Optional[datetime] = None,
    uploader: Optional[Callable] = None,
) -> dict:
    """
    media is (content, filename, content_type) as returned by read_media_file.
    """
    if not user:
        return {"success": False, "message": "You must be signed in to post", "requires_auth": True}

    text = (content or "").strip()
    if not text and not media:
        return {"success": False, "message": EMPTY_POST_MESSAGE}

    media_urls, media_types = [], []
    if media:
        data, filename, content_type = media
        try:
            uploaded = media_service.upload_post_media(
                data, filename, content_type, layout=layout, sensitive=sensitive, uploader=uploader
            )
        except Exception as e:
            logger.error("Media upload failed for %s: %s", user["user_id"], e)
            return {"success": False, "message": f"Failed to upload media: {e}"}
        media_urls.append(uploaded["url"])
        media_types.append(uploaded["media_type"])

    try:
        post = posts.create_post(
            user["user_id"],
            text,
            media_urls=media_urls,
            media_types=media_types,
            location=(location or "").strip() or None,
            scheduled_for=schedule_date.isoformat() if schedule_date else None,
        )
    except Exception as e:
        logger.error("Post creation failed for %s: %s", user["user_id"], e)
        return {"success": False, "message": f"Failed to create post: {e}"}

    logger.info("Post %s created by %s", post.get("id"), user["user_id"])
    return {"success": True, "message": "Post created successfully", "id": post.get("id")}
