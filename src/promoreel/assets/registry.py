"""In-memory library of selectable product images.

Holds preloaded and uploaded MediaAssets, the ordered selection used for
video generation, and enforces the upload quota.
"""

import asyncio
import logging
import mimetypes
import uuid
from pathlib import Path

import httpx

from promoreel.config.settings import AssetSettings
from promoreel.errors import InputValidationError, UploadQuotaError
from promoreel.models.assets import AssetOrigin, MediaAsset

from .loader import detect_mime_type, encode_image, fetch_image, join_source
from .previews import PreviewStore

logger = logging.getLogger(__name__)

SELECTION_LIMIT = 3


class UploadedFile:
    """A file offered for upload: name, raw bytes and declared MIME type."""

    def __init__(self, name: str, data: bytes, mime_type: str | None = None) -> None:
        self.name = name
        self.data = data
        self.mime_type = mime_type or mimetypes.guess_type(name)[0] or detect_mime_type(data)

    @classmethod
    def from_path(cls, path: Path | str) -> "UploadedFile":
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes())

    @property
    def is_image(self) -> bool:
        return bool(self.mime_type and self.mime_type.startswith("image/"))


def toggle_selection(
    selection: list[str], asset_id: str, limit: int = SELECTION_LIMIT
) -> tuple[list[str], bool]:
    """Toggle ``asset_id`` in an ordered selection.

    Returns:
        The new selection and whether the limit prevented adding the id.
        At the limit the selection is returned unchanged.
    """
    if asset_id in selection:
        return [i for i in selection if i != asset_id], False
    if len(selection) < limit:
        return [*selection, asset_id], False
    return list(selection), True


class AssetRegistry:
    """Owns the media library, the selection and the upload quota."""

    def __init__(
        self,
        settings: AssetSettings,
        previews: PreviewStore,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.previews = previews
        self._transport = transport
        self._assets: list[MediaAsset] = []
        self._selection: list[str] = []
        self.failed_preloads: list[str] = []

    @property
    def assets(self) -> list[MediaAsset]:
        return list(self._assets)

    @property
    def selection(self) -> list[str]:
        return list(self._selection)

    @property
    def uploaded_count(self) -> int:
        return sum(1 for a in self._assets if a.origin == AssetOrigin.UPLOADED)

    @property
    def remaining_uploads(self) -> int:
        return max(0, self.settings.max_uploads - self.uploaded_count)

    def get(self, asset_id: str) -> MediaAsset | None:
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    def selected_assets(self) -> list[MediaAsset]:
        """Selected assets in selection order."""
        by_id = {a.id: a for a in self._assets}
        return [by_id[i] for i in self._selection if i in by_id]

    async def load_preloaded(self) -> list[MediaAsset]:
        """Load the configured preloaded images.

        Images that fail to load are logged and skipped; the names of the
        failed sources are kept in ``failed_preloads``.

        Returns:
            The preloaded assets that loaded, in configured order.
        """
        sources = [
            join_source(self.settings.preloaded_source, name)
            for name in self.settings.preloaded_images
        ]
        async with httpx.AsyncClient(
            follow_redirects=True, transport=self._transport
        ) as client:
            results = await asyncio.gather(
                *(
                    self._load_one(client, index, source)
                    for index, source in enumerate(sources, start=1)
                )
            )

        loaded = [asset for asset in results if asset is not None]
        self.failed_preloads = [
            source for source, asset in zip(sources, results) if asset is None
        ]
        uploaded = [a for a in self._assets if a.origin == AssetOrigin.UPLOADED]
        self._assets = [*loaded, *uploaded]

        if self.failed_preloads:
            logger.warning(
                "%d of %d preloaded images failed to load.",
                len(self.failed_preloads),
                len(sources),
            )
        logger.info("Loaded %d preloaded images.", len(loaded))
        return loaded

    async def _load_one(
        self, client: httpx.AsyncClient, index: int, source: str
    ) -> MediaAsset | None:
        try:
            image_bytes, mime_type = await fetch_image(source, client)
        except Exception as exc:
            logger.warning("Failed to load preloaded image %s: %s", source, exc)
            return None
        return MediaAsset(
            id=f"preloaded-{index}",
            origin=AssetOrigin.PRELOADED,
            preview_locator=source,
            image_bytes=image_bytes,
            mime_type=mime_type,
            name=Path(source).name,
        )

    def add_uploaded(self, files: list[UploadedFile]) -> list[MediaAsset]:
        """Add image files to the library, respecting the upload quota.

        Non-image files are ignored. When more images are offered than
        slots remain, only the leading ones that fit are added.

        Returns:
            The newly added assets.

        Raises:
            UploadQuotaError: If some images were rejected for lack of
                slots. The accepted prefix has already been added.
        """
        images = [f for f in files if f.is_image]
        if len(images) < len(files):
            logger.debug("Ignored %d non-image files.", len(files) - len(images))

        remaining = self.remaining_uploads
        allowed, overflow = images[:remaining], images[remaining:]

        added: list[MediaAsset] = []
        for upload in allowed:
            image_bytes, mime_type = encode_image(upload.data, upload.mime_type)
            asset = MediaAsset(
                id=str(uuid.uuid4()),
                origin=AssetOrigin.UPLOADED,
                preview_locator=self.previews.create(upload.data, mime_type),
                image_bytes=image_bytes,
                mime_type=mime_type,
                name=upload.name,
            )
            self._assets.append(asset)
            added.append(asset)

        logger.info("Added %d uploaded images.", len(added))

        if overflow:
            raise UploadQuotaError(
                f"Upload limit reached. You can only upload "
                f"{self.settings.max_uploads} additional images.",
                added=added,
                rejected=len(overflow),
            )
        return added

    def remove(self, asset_id: str) -> MediaAsset | None:
        """Delete an uploaded asset, release its preview and deselect it.

        Returns:
            The removed asset, or None if no asset has that id.

        Raises:
            InputValidationError: If the asset is preloaded.
        """
        asset = self.get(asset_id)
        if asset is None:
            return None
        if asset.is_preloaded:
            raise InputValidationError("Preloaded images cannot be deleted.")

        self._assets = [a for a in self._assets if a.id != asset_id]
        self._selection = [i for i in self._selection if i != asset_id]
        self.previews.release(asset.preview_locator)
        logger.debug("Removed uploaded asset %s", asset_id)
        return asset

    def toggle(self, asset_id: str) -> bool:
        """Toggle an asset in the selection.

        Returns:
            True if the selection limit prevented adding the asset.

        Raises:
            InputValidationError: If no asset has that id.
        """
        if self.get(asset_id) is None:
            raise InputValidationError(f"Unknown image: {asset_id}")
        self._selection, limit_reached = toggle_selection(
            self._selection, asset_id, self.settings.max_selection
        )
        return limit_reached

    def clear_selection(self) -> None:
        self._selection = []
