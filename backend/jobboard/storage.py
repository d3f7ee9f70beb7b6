import logging
import pathlib
import secrets
import time
from typing import Optional

from . import config

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}
MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_FILES_PER_UPLOAD = 3


class UploadRejected(ValueError):
    pass


def check_image(filename: str, content_type: Optional[str], size: int) -> None:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected(f"Invalid file type: {content_type}. Only images (JPEG, PNG, WEBP, GIF) are allowed.")
    if size > MAX_IMAGE_BYTES:
        raise UploadRejected(f"File {filename} is too large. Maximum size is 5MB.")


class LocalBlobStore:
    """Stores uploaded files on disk and hands out public URLs for them."""

    def __init__(self, root: str = config.UPLOAD_DIR, base_url: str = config.UPLOAD_BASE_URL):
        self.root = pathlib.Path(root)
        self.base_url = base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def put(self, folder: str, prefix: str, filename: str, data: bytes) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
        name = f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"
        dest = self.root / folder / name
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", dest, len(data))
        return f"{self.base_url}/{folder}/{name}"


_store: Optional[LocalBlobStore] = None


def get_store() -> LocalBlobStore:
    global _store
    if _store is None:
        _store = LocalBlobStore()
    return _store
