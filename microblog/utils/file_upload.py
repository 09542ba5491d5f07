"""
File Upload Utility - read post media from a multipart form.

Supported formats:
- Images (image/*)
- Videos (video/*)

Max file size: settings.max_upload_mb
"""

from typing import Optional, Tuple

from fastapi import HTTPException, UploadFile

from microblog.core.config import get_settings

settings = get_settings()

ALLOWED_PREFIXES = ("image/", "video/")


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_media_file(file: Optional[UploadFile]) -> Optional[Tuple[bytes, str, str]]:
    """
    Read an optional media upload.

    Args:
        file: FastAPI UploadFile, or None when the form has no file

    Returns:
        None when no file was chosen, else (content, filename, content_type)

    Raises:
        HTTPException on validation errors
    """
    if file is None or not file.filename:
        return None

    content_type = file.content_type or ""
    if not content_type.startswith(ALLOWED_PREFIXES):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{content_type or get_file_extension(file.filename)}'. Allowed: images, videos"
        )

    content = await file.read()
    if not content:
        return None

    if len(content) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_mb}MB"
        )

    return content, file.filename, content_type
