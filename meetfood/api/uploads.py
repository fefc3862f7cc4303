"""Validation helpers for multipart media uploads."""
from fastapi import UploadFile

from meetfood.core.exceptions import BadRequest

IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}
VIDEO_TYPES = {"video/mp4", "video/quicktime"}

EXT_MAP = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
}


def validate_file(file: UploadFile, allowed: set[str]) -> str:
    """Return the stored file extension for an allowed content type."""
    content_type = file.content_type or ""
    if content_type not in allowed:
        raise BadRequest(f"Invalid file type: {content_type or 'unknown'}. Allowed: {', '.join(sorted(allowed))}")
    return EXT_MAP[content_type]


async def read_and_validate_size(file: UploadFile, max_size_mb: int) -> bytes:
    data = await file.read()
    if not data:
        raise BadRequest("Empty file")
    if len(data) > max_size_mb * 1024 * 1024:
        raise BadRequest(f"File too large. Max {max_size_mb}MB")
    return data
