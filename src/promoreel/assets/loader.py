"""Image loading and base64 conversion."""

import asyncio
import base64
import io
import mimetypes
from pathlib import Path

import httpx
from PIL import Image, UnidentifiedImageError


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def join_source(base: str, filename: str) -> str:
    """Resolve a file name against a directory or base URL."""
    if is_url(base):
        return f"{base.rstrip('/')}/{filename}"
    return str(Path(base) / filename)


def detect_mime_type(data: bytes) -> str | None:
    """Identify an image MIME type from its bytes, or None if not an image."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        return None
    if fmt is None:
        return None
    return Image.MIME.get(fmt)


def encode_image(data: bytes, declared_mime: str | None = None) -> tuple[str, str]:
    """Convert raw image bytes to ``(base64, mime_type)``.

    Raises:
        ValueError: If no MIME type is declared and the bytes are not a
            recognisable image.
    """
    mime_type = declared_mime or detect_mime_type(data)
    if not mime_type:
        raise ValueError("Unrecognised image data")
    return base64.b64encode(data).decode("ascii"), mime_type


async def fetch_image(
    location: str, client: httpx.AsyncClient | None = None
) -> tuple[str, str]:
    """Fetch an image from a URL or local path and convert it to base64.

    Raises:
        httpx.HTTPError: On network or HTTP status errors.
        OSError: If a local file cannot be read.
        ValueError: If the content is not a recognisable image.
    """
    if is_url(location):
        if client is None:
            raise ValueError("An HTTP client is required to fetch remote images")
        response = await client.get(location)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        declared = content_type if content_type.startswith("image/") else None
        return encode_image(response.content, declared)

    data = await asyncio.to_thread(Path(location).read_bytes)
    return encode_image(data, mimetypes.guess_type(location)[0])
