"""Media asset models for promoreel."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class AssetOrigin(StrEnum):
    """Where a media asset came from."""

    PRELOADED = "preloaded"
    UPLOADED = "uploaded"


class MediaAsset(BaseModel):
    """A selectable product image.

    Preloaded assets are immutable and cannot be deleted. Uploaded assets
    own a preview resource that must be released when they are removed.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Opaque asset identifier")
    origin: AssetOrigin
    preview_locator: str = Field(
        ..., description="Where the image can be previewed (path or URL)"
    )
    image_bytes: str = Field(
        ..., repr=False, description="Base64-encoded image payload"
    )
    mime_type: str = Field(..., description="Image MIME type, e.g. image/png")
    name: str = Field(default="", description="Original file name, if known")

    @property
    def is_preloaded(self) -> bool:
        return self.origin == AssetOrigin.PRELOADED
