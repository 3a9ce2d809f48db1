"""Object storage for uploaded images.

Objects live on local disk under ``settings.media_dir`` and are published
under ``settings.media_public_base_url``. Keys are deterministic in shape:

    event-media/<event_id>/<millis>-<12 hex>.<ext>
    team/member-<member_id>-<millis>-<10 hex>.<ext>
"""

import asyncio
import logging
import secrets
import time
from io import BytesIO
from pathlib import Path, PurePosixPath

from PIL import Image, UnidentifiedImageError

from solarwatch.config import settings

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": "png",
    "image/webp": "webp",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
}


def guess_image_ext(mime: str | None) -> str:
    return _EXTENSIONS.get(mime or "", "jpg")


def sniff_image(data: bytes) -> str | None:
    """Return the MIME type of an image payload, or None if Pillow cannot read it."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.verify()
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None


def _stamp(hex_len: int) -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(hex_len // 2)}"


class MediaStorage:
    def __init__(self, root: Path, public_base: str):
        self.root = root
        self.public_base = public_base.rstrip("/")

    def event_media_key(self, event_id: int, mime: str | None) -> str:
        return f"event-media/{event_id}/{_stamp(12)}.{guess_image_ext(mime)}"

    def team_photo_key(self, member_id: int, mime: str | None) -> str:
        return f"team/member-{member_id}-{_stamp(10)}.{guess_image_ext(mime)}"

    def url_for_key(self, key: str) -> str:
        return f"{self.public_base}/{key}"

    def key_for_url(self, url: str | None) -> str | None:
        """Map a public URL back to its key; None for URLs this store did not issue."""
        prefix = self.public_base + "/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):]

    def path_for_key(self, key: str) -> Path | None:
        parts = PurePosixPath(key).parts
        if not parts or any(p in ("..", "/") for p in parts):
            return None
        return self.root.joinpath(*parts)

    def _write(self, key: str, data: bytes) -> None:
        path = self.path_for_key(key)
        if path is None:
            raise ValueError(f"Invalid storage key: {key}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def put(self, key: str, data: bytes) -> str:
        """Store an object and return its public URL."""
        await asyncio.to_thread(self._write, key, data)
        logger.debug("Stored %d bytes at %s", len(data), key)
        return self.url_for_key(key)

    async def delete_url(self, url: str | None) -> bool:
        """Best-effort removal of the object behind a public URL."""
        key = self.key_for_url(url)
        if key is None:
            return False
        path = self.path_for_key(key)
        if path is None:
            return False
        try:
            await asyncio.to_thread(path.unlink, True)
            return True
        except OSError as exc:
            logger.warning("Failed to delete stored object %s: %s", key, exc)
            return False


_storage: MediaStorage | None = None


def get_media_storage() -> MediaStorage:
    global _storage
    if _storage is None:
        _storage = MediaStorage(settings.media_dir, settings.media_public_base_url)
    return _storage
