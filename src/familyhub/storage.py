"""Object storage for avatars and activity images.

Files live under ``UPLOADS_DIR/<bucket>/<name>`` and are served by the web app
below ``PUBLIC_STORAGE_URL``.
"""

import asyncio
import re
import uuid
from pathlib import Path, PurePosixPath

from .config import settings
from .errors import StorageError
from .logging_config import get_logger

logger = get_logger(__name__)

AVATARS_BUCKET = "avatars"
ACTIVITY_IMAGES_BUCKET = "activity_images"

_SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


def random_file_name(original: str) -> str:
    """A random object name that keeps the original extension."""
    suffix = PurePosixPath(original or "").suffix.lower()
    return f"{uuid.uuid4()}{suffix}"


class LocalObjectStorage:
    """Bucketed file storage on the local disk."""

    def __init__(self, root: Path | None = None, public_url: str | None = None):
        self.root = root or settings.UPLOADS_DIR
        self.public_url = (public_url or settings.PUBLIC_STORAGE_URL).rstrip("/")

    def _path(self, bucket: str, name: str) -> Path:
        if not _SAFE_NAME.match(bucket) or not _SAFE_NAME.match(name) or name.startswith("."):
            raise StorageError(f"Invalid object name: {bucket}/{name}")
        if PurePosixPath(name).suffix.lower() not in IMAGE_EXTENSIONS:
            # Uploads are served from our own origin; only images may go there
            raise StorageError(f"Unsupported file type: {name}")
        return self.root / bucket / name

    def get_public_url(self, bucket: str, name: str) -> str:
        return f"{self.public_url}/{bucket}/{name}"

    async def upload(self, bucket: str, name: str, data: bytes) -> str:
        """Store ``data`` and return its public URL."""
        path = self._path(bucket, name)
        try:
            await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as e:
            logger.error(f"Upload to {bucket}/{name} failed: {e}")
            raise StorageError(f"Upload failed: {e}") from e

        logger.info(f"Stored {len(data)} bytes in {bucket}/{name}")
        return self.get_public_url(bucket, name)
