"""
Media Service - post media on Cloudinary.

Uploads go to the posts folder with a unique filename. Images can be
cropped at upload time (square or wide); videos are stored as-is.
Delivery URLs are built with on-the-fly transformations.
"""

import io
import logging
from typing import Callable, List, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.utils

from microblog.core.config import get_settings
from microblog.schemas.schemas import ImageLayout, MediaType

logger = logging.getLogger(__name__)
settings = get_settings()

UPLOAD_WIDTH = 600
ASPECT_RATIOS = {
    ImageLayout.square: "1:1",
    ImageLayout.wide: "16:9",
}
PLACEHOLDER_QUALITY = 20


class MediaUploadError(Exception):
    """Raised when the CDN rejects an upload."""


def configure_cloudinary() -> bool:
    """Apply Cloudinary credentials from settings. False if any are missing."""
    if not settings.cloudinary_configured:
        logger.warning("Cloudinary credentials missing, media uploads will fail")
        return False
    cloudinary.config(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        secure=True,
    )
    return True


def get_media_type(content_type: Optional[str]) -> MediaType:
    if content_type and content_type.startswith("image/"):
        return MediaType.image
    return MediaType.video


def build_transformation(layout: ImageLayout) -> Optional[List[dict]]:
    """Upload-time crop for an image layout, None for the original shape."""
    aspect_ratio = ASPECT_RATIOS.get(ImageLayout(layout))
    if aspect_ratio is None:
        return None
    return [{"width": UPLOAD_WIDTH, "aspect_ratio": aspect_ratio, "crop": "fill"}]


def upload_post_media(
    data: bytes,
    filename: str,
    content_type: str,
    layout: ImageLayout = ImageLayout.original,
    sensitive: bool = False,
    uploader: Optional[Callable] = None,
) -> dict:
    """
    Upload one media file for a post.

    Returns {"url", "media_type", "public_id"}; raises MediaUploadError.
    """
    upload = uploader or cloudinary.uploader.upload
    media_type = get_media_type(content_type)

    options = {
        "folder": settings.media_folder,
        "resource_type": media_type.value,
        "use_filename": True,
        "unique_filename": True,
        "filename_override": filename,
        "context": {"sensitive": "true" if sensitive else "false"},
    }
    if media_type == MediaType.image:
        transformation = build_transformation(layout)
        if transformation:
            options["transformation"] = transformation

    try:
        result = upload(io.BytesIO(data), **options)
    except Exception as e:
        logger.error("Error uploading media: %s", e)
        raise MediaUploadError(str(e)) from e

    url = result.get("secure_url") or result.get("url")
    if not url:
        raise MediaUploadError("Upload returned no URL")
    return {"url": url, "media_type": media_type.value, "public_id": result.get("public_id")}


# ============================================================
# DELIVERY URLS
# ============================================================

def _delivery_url(path: str, **options) -> str:
    """Cloudinary URL for a stored asset; the bare path until a cloud is configured."""
    if not cloudinary.config().cloud_name:
        return path
    url, _ = cloudinary.utils.cloudinary_url(path, **options)
    return url


def image_url(path: str, width: Optional[int] = None, height: Optional[int] = None,
              transform: bool = True) -> str:
    """CDN URL for an image, resized on the fly when transform is set."""
    if not transform:
        return _delivery_url(path)
    options = {"crop": "fill", "quality": "auto", "fetch_format": "auto"}
    if width:
        options["width"] = width
    if height:
        options["height"] = height
    return _delivery_url(path, **options)


def placeholder_url(path: str) -> str:
    """Low quality version shown while the real image loads."""
    return _delivery_url(path, quality=PLACEHOLDER_QUALITY, width=UPLOAD_WIDTH, crop="limit")


def video_url(path: str, width: Optional[int] = None) -> str:
    options = {"resource_type": "video"}
    if width:
        options.update(width=width, crop="limit")
    return _delivery_url(path, **options)
