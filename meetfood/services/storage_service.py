"""Blob storage for profile photos, cover images and videos.

Each content class has its own bucket; a bucket maps to a directory under
``UPLOAD_DIR`` and to the URL prefix ``{MEDIA_BASE_URL}/uploads/{bucket}/``.
Uses local disk; an object-store backend only has to satisfy StorageBackend.
"""
import uuid
from enum import Enum
from pathlib import Path
from typing import Protocol

from loguru import logger

from meetfood.core.config import settings
from meetfood.core.exceptions import StorageError


class ContentClass(str, Enum):
    PROFILE_PHOTO = "profilePhoto"
    COVER_IMAGE = "coverImage"
    VIDEO = "video"


def bucket_for(content_class: ContentClass) -> str:
    return {
        ContentClass.PROFILE_PHOTO: settings.BUCKET_PROFILE_PHOTOS,
        ContentClass.COVER_IMAGE: settings.BUCKET_COVER_IMAGES,
        ContentClass.VIDEO: settings.BUCKET_VIDEOS,
    }[content_class]


class StorageBackend(Protocol):
    """Protocol for storage backends."""

    def put(self, data: bytes, content_class: ContentClass, ext: str) -> str:
        """Store bytes and return the public URL."""
        ...

    def delete(self, url: str, content_class: ContentClass) -> bool:
        """Delete the object behind ``url``. False if nothing of ours was there; raises StorageError on failure."""
        ...


class LocalStorage:
    """Store files on local disk. Path: {UPLOAD_DIR}/{bucket}/{uuid}.{ext}"""

    def __init__(self, base_dir: str | None = None, base_url: str | None = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.base_url = (base_url or settings.MEDIA_BASE_URL).rstrip("/")

    def url_prefix(self, content_class: ContentClass) -> str:
        return f"{self.base_url}/uploads/{bucket_for(content_class)}/"

    def _bucket_path(self, content_class: ContentClass) -> Path:
        path = self.base_dir / bucket_for(content_class)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def put(self, data: bytes, content_class: ContentClass, ext: str) -> str:
        filename = f"{uuid.uuid4().hex}{ext}"
        try:
            (self._bucket_path(content_class) / filename).write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to store {content_class.value} object {filename}: {e}")
            raise StorageError(f"Error occured while trying to upload {content_class.value} to storage") from e
        logger.info(f"Stored {content_class.value} object {filename} ({len(data)} bytes)")
        return self.url_prefix(content_class) + filename

    def delete(self, url: str, content_class: ContentClass) -> bool:
        prefix = self.url_prefix(content_class)
        if not url or not url.startswith(prefix):
            logger.warning(f"Skipping delete of {url!r}: not stored in the {content_class.value} bucket")
            return False
        key = url[len(prefix):]
        if not key or "/" in key or key in (".", ".."):
            raise StorageError(f"Invalid {content_class.value} object key: {key!r}")
        filepath = self._bucket_path(content_class) / key
        try:
            if not filepath.exists():
                logger.warning(f"{content_class.value} object already absent: {key}")
                return False
            filepath.unlink()
        except OSError as e:
            logger.error(f"Failed to delete {content_class.value} object {key}: {e}")
            raise StorageError(f"Error occured while trying to delete the {content_class.value} from storage") from e
        logger.info(f"Deleted {content_class.value} object {key}")
        return True


# Singleton - swap implementation here when moving to an object store
_storage: StorageBackend | None = None


def get_storage() -> StorageBackend:
    global _storage
    if _storage is None:
        _storage = LocalStorage()
    return _storage
