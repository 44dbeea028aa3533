"""Pytest configuration and fixtures for promoreel tests."""

import base64
import io
from pathlib import Path

import pytest
from PIL import Image

from promoreel.assets import PreviewStore
from promoreel.config.settings import AssetSettings
from promoreel.models import (
    AssetOrigin,
    MediaAsset,
    RefinementSuggestions,
    VideoConcept,
)


def _png(color: str = "red", size: tuple[int, int] = (4, 4)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _asset(asset_id: str = "a1", origin: AssetOrigin = AssetOrigin.UPLOADED) -> MediaAsset:
    return MediaAsset(
        id=asset_id,
        origin=origin,
        preview_locator=f"/tmp/{asset_id}.png",
        image_bytes=base64.b64encode(_png()).decode("ascii"),
        mime_type="image/png",
        name=f"{asset_id}.png",
    )


def _concept(n: int = 1) -> VideoConcept:
    return VideoConcept(
        title=f"Concept {n}",
        description=f"Description {n}",
        visuals=f"Visuals {n}",
        video_prompt=f"A glowing lamp lights a hallway, take {n}.",
    )


def _suggestions(**overrides: object) -> RefinementSuggestions:
    data: dict[str, object] = {
        "styles": ["Cinematic", "Documentary", "Minimalist", "Playful"],
        "environments": ["A cozy bedroom", "A smart hallway", "A nursery", "A loft"],
        "lightings": ["Soft moonlight", "Warm glow", "Cool dusk", "Candlelight"],
        "details": ["Close-up of texture", "A cat walks by", "Child waking", "Timelapse"],
        "recommended_duration": 8,
    }
    data.update(overrides)
    return RefinementSuggestions.model_validate(data)


@pytest.fixture
def png_bytes() -> bytes:
    return _png()


@pytest.fixture
def previews(tmp_path: Path) -> PreviewStore:
    return PreviewStore(tmp_path / "previews")


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """A directory with two preloaded images, 0001.png and 0002.png."""
    directory = tmp_path / "images"
    directory.mkdir()
    (directory / "0001.png").write_bytes(_png("red"))
    (directory / "0002.png").write_bytes(_png("blue"))
    return directory


@pytest.fixture
def asset_settings(image_dir: Path) -> AssetSettings:
    return AssetSettings(
        preloaded_source=str(image_dir),
        preloaded_images=["0001.png", "0002.png"],
    )


@pytest.fixture
def concept() -> VideoConcept:
    return _concept()


@pytest.fixture
def suggestions() -> RefinementSuggestions:
    return _suggestions()


@pytest.fixture
def make_png():
    return _png


@pytest.fixture
def make_asset():
    return _asset


@pytest.fixture
def make_concept():
    return _concept


@pytest.fixture
def make_suggestions():
    return _suggestions
