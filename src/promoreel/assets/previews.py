"""Session-scoped preview resources.

Uploaded images and downloaded videos are written to a temporary
directory owned by the session. Each resource is released exactly once:
on asset deletion, when a newer job replaces a video, or at teardown.
"""

import logging
import mimetypes
import shutil
import tempfile
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


class PreviewStore:
    """Creates and releases locally addressable preview files."""

    def __init__(self, root: Path | str | None = None) -> None:
        self._root = Path(root) if root else None
        self._owns_root = root is None
        self._live: set[str] = set()

    @property
    def root(self) -> Path:
        """Directory holding live previews, created on first use."""
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix="promoreel-"))
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    @property
    def live_count(self) -> int:
        return len(self._live)

    def create(self, data: bytes, mime_type: str) -> str:
        """Write ``data`` to a new preview file and return its locator."""
        suffix = mimetypes.guess_extension(mime_type) or ".bin"
        path = self.root / f"{uuid.uuid4().hex}{suffix}"
        path.write_bytes(data)
        locator = str(path)
        self._live.add(locator)
        logger.debug("Created preview %s (%d bytes)", locator, len(data))
        return locator

    def is_live(self, locator: str) -> bool:
        return locator in self._live

    def release(self, locator: str) -> bool:
        """Delete a preview. Returns False if it was not live."""
        if locator not in self._live:
            return False
        self._live.discard(locator)
        Path(locator).unlink(missing_ok=True)
        logger.debug("Released preview %s", locator)
        return True

    def close(self) -> None:
        """Release every live preview and remove a self-created root."""
        for locator in list(self._live):
            self.release(locator)
        if self._owns_root and self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            self._root = None
