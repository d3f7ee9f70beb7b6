"""Picture selection before an entity save: validate, preview, upload."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..storage import MAX_FILES_PER_UPLOAD, UploadRejected, check_image
from .api import Upload, UploadApi

logger = logging.getLogger(__name__)

LOGO = "logo"


@dataclass
class PendingPicture:
    filename: str
    data: bytes
    content_type: str
    preview: str = field(default_factory=lambda: f"preview:{uuid.uuid4()}")

    def as_upload(self) -> Upload:
        return (self.filename, self.data, self.content_type)


class PictureField:
    """Already uploaded URLs plus files waiting to be uploaded.

    Every pending file holds a preview handle until it is removed, released
    or uploaded; `live_previews` is the set of handles still held.
    """

    def __init__(self, urls: Sequence[str] = (), cap: int = MAX_FILES_PER_UPLOAD):
        self.cap = cap
        self.kept: List[str] = list(urls)
        self.pending: List[PendingPicture] = []
        self.error: Optional[str] = None
        self.live_previews: set = set()

    @property
    def count(self) -> int:
        return len(self.kept) + len(self.pending)

    def add(self, files: Iterable[Upload]) -> bool:
        """Accept the files, or set `error` and accept none of them."""
        files = list(files)
        self.error = None
        if self.count + len(files) > self.cap:
            self.error = f"Maximum {self.cap} pictures allowed"
            return False
        for filename, data, content_type in files:
            try:
                check_image(filename, content_type, len(data))
            except UploadRejected as exc:
                self.error = str(exc)
                return False
        for filename, data, content_type in files:
            picture = PendingPicture(filename, data, content_type)
            self.live_previews.add(picture.preview)
            self.pending.append(picture)
        return True

    def remove(self, ref: str) -> None:
        """Drop a kept URL or a pending file by its preview handle."""
        if ref in self.kept:
            self.kept.remove(ref)
            return
        for picture in self.pending:
            if picture.preview == ref:
                self.pending.remove(picture)
                self.live_previews.discard(ref)
                return
        raise KeyError(ref)

    def release_all(self) -> None:
        self.live_previews.clear()

    def previews(self) -> List[Dict[str, str]]:
        items = [{"src": url, "kind": "uploaded"} for url in self.kept]
        items += [{"src": p.preview, "kind": "pending"} for p in self.pending]
        return items

    async def submit(self, api: UploadApi, endpoint: str) -> List[str]:
        """Upload pending files and return the full list of picture URLs."""
        if self.pending:
            uploads = [p.as_upload() for p in self.pending]
            if endpoint == LOGO:
                paths = [await api.logo(uploads[0])]
            else:
                paths = await api.pictures(endpoint, uploads)
            logger.debug("Uploaded %d picture(s) to %s", len(paths), endpoint)
            self.kept.extend(paths)
            self.pending = []
            self.release_all()
        return list(self.kept)
