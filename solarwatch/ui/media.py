"""Editor media items and the local previews backing unsaved ones."""

import logging
import mimetypes
import tempfile
from dataclasses import dataclass
from pathlib import Path

from solarwatch.client.api import FilePayload
from solarwatch.schemas.event import MediaRow

logger = logging.getLogger(__name__)


class PreviewHandle:
    """A local rendering of a picked file. Must be released once its item is retired."""

    def __init__(self, store: "PreviewStore", path: Path):
        self._store = store
        self.path = path
        self.released = False

    @property
    def url(self) -> str:
        return self.path.as_uri()

    def release(self) -> None:
        """Drop the preview file. Safe to call more than once."""
        if self.released:
            return
        self.released = True
        self.path.unlink(missing_ok=True)
        self._store._forget(self)

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"<PreviewHandle {self.path.name} {state}>"


class PreviewStore:
    """Creates preview files in a scratch directory and tracks the live ones."""

    def __init__(self, root: Path | None = None):
        self.root = Path(root) if root else Path(tempfile.mkdtemp(prefix="solarwatch-previews-"))
        self.root.mkdir(parents=True, exist_ok=True)
        self._live: set[PreviewHandle] = set()

    def create(self, file: FilePayload) -> PreviewHandle:
        suffix = Path(file.filename).suffix or mimetypes.guess_extension(file.content_type) or ""
        with tempfile.NamedTemporaryFile(dir=self.root, suffix=suffix, delete=False) as fh:
            fh.write(file.content)
        handle = PreviewHandle(self, Path(fh.name))
        self._live.add(handle)
        return handle

    def _forget(self, handle: PreviewHandle) -> None:
        self._live.discard(handle)

    def live_count(self) -> int:
        return len(self._live)

    def release_all(self) -> None:
        handles = list(self._live)
        for handle in handles:
            handle.release()
        if handles:
            logger.debug("Released %d leftover previews", len(handles))


@dataclass
class QueuedMedia:
    """Picked in create mode, waiting for its event to exist. Never has a server id."""

    local_id: str
    file: FilePayload
    preview: PreviewHandle
    caption: str = ""

    @property
    def display_url(self) -> str:
        return self.preview.url


@dataclass
class PersistedMedia:
    """A media row as stored server-side."""

    id: int
    event_id: int
    url: str
    caption: str | None = None

    @property
    def display_url(self) -> str:
        return self.url

    @classmethod
    def from_row(cls, row: MediaRow) -> "PersistedMedia":
        return cls(id=row.id, event_id=row.event_id, url=row.url, caption=row.caption)


MediaItem = QueuedMedia | PersistedMedia


def confirmed_caption(item: MediaItem | None) -> str:
    if item is None:
        return ""
    return item.caption or ""
