"""
Object storage for user uploads (profile pictures, resumes, company logos).

Files live under ``settings.storage_dir`` and are served from
``settings.storage_base_url``. Uploads are validated by the caller with
validate_upload() before they reach the store.
"""
import asyncio
import logging
import os
import uuid
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.config import settings
from jobboard.errors import InternalError, ValidationError

logger = logging.getLogger(__name__)

# Configuration
MAX_IMAGE_SIZE_MB = 5
MAX_RESUME_SIZE_MB = 10

IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}
RESUME_TYPES = {"application/pdf"}

# Upload kind -> (allowed MIME types, max size in MB)
UPLOAD_RULES = {
    "image": (IMAGE_TYPES, MAX_IMAGE_SIZE_MB),
    "resume": (RESUME_TYPES, MAX_RESUME_SIZE_MB),
}

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}


def max_upload_bytes(kind: str) -> int:
    return UPLOAD_RULES[kind][1] * 1024 * 1024


def validate_upload(kind: str, content_type: Optional[str], size: int) -> None:
    """
    Validate an upload before it is stored.

    Raises:
        ValidationError: empty file, wrong MIME type or too large
    """
    allowed_types, max_size_mb = UPLOAD_RULES[kind]
    if size <= 0:
        raise ValidationError("No file provided")
    if content_type not in allowed_types:
        raise ValidationError(
            f"Invalid file type. Allowed: {', '.join(sorted(allowed_types))}"
        )
    if size > max_upload_bytes(kind):
        raise ValidationError(f"File too large. Maximum size: {max_size_mb}MB")


def object_path(folder: str, owner_id, content_type: str) -> str:
    """Fresh object path, e.g. ``profile-pictures/<user>/<hex>.png``."""
    return f"{folder}/{owner_id}/{uuid.uuid4().hex}{EXTENSIONS.get(content_type, '')}"


class LocalObjectStorage:
    """Filesystem-backed object store with public URLs under a base URL."""

    def __init__(self, root_dir: str, base_url: str):
        self.root = Path(root_dir)
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValidationError("Invalid object path")
        return self.root.joinpath(*relative.parts)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def path_for_url(self, url: Optional[str]) -> Optional[str]:
        """Object path for a URL this store issued, else None."""
        prefix = f"{self.base_url}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None

    def upload(self, data: bytes, content_type: str, path: str) -> str:
        """Store `data` at `path` and return its public URL."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"Stored {len(data)} bytes ({content_type}) at {path}")
        return self.public_url(path)

    def delete(self, path: str) -> None:
        """Delete an object. Missing objects and I/O errors are logged, not raised."""
        try:
            target = self._resolve(path)
            if target.exists():
                os.remove(target)
        except (OSError, ValidationError) as e:
            logger.warning(f"Failed to delete stored object {path}: {str(e)}")


def get_storage() -> LocalObjectStorage:
    """FastAPI dependency returning the configured object store."""
    return LocalObjectStorage(settings.storage_dir, settings.storage_base_url)


async def upload_and_attach(
    db: AsyncSession,
    storage: LocalObjectStorage,
    data: bytes,
    content_type: str,
    path: str,
    attach: Callable[[str], Optional[str]]
) -> str:
    """
    Upload a file, then persist its URL with `attach`.

    `attach(url)` sets the URL on a loaded row and returns the URL it
    replaced. If the commit fails the new object is deleted again; the old
    object is deleted only after the new URL is committed.
    """
    url = await asyncio.to_thread(storage.upload, data, content_type, path)
    try:
        previous_url = attach(url)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        await asyncio.to_thread(storage.delete, path)
        logger.error(f"Failed to save uploaded file {path}: {e}", exc_info=True)
        raise InternalError("Failed to save uploaded file") from e

    previous_path = storage.path_for_url(previous_url)
    if previous_path and previous_path != path:
        await asyncio.to_thread(storage.delete, previous_path)
    return url


def replace_attribute(obj, attribute: str) -> Callable[[str], Optional[str]]:
    """attach callback for upload_and_attach: set obj.<attribute>, return the old value."""
    def attach(url: str) -> Optional[str]:
        previous = getattr(obj, attribute)
        setattr(obj, attribute, url)
        return previous
    return attach
