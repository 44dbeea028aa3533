"""Product image library for promoreel."""

from .loader import detect_mime_type, encode_image, fetch_image
from .previews import PreviewStore
from .registry import SELECTION_LIMIT, AssetRegistry, UploadedFile, toggle_selection

__all__ = [
    "SELECTION_LIMIT",
    "AssetRegistry",
    "PreviewStore",
    "UploadedFile",
    "detect_mime_type",
    "encode_image",
    "fetch_image",
    "toggle_selection",
]
