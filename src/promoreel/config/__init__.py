"""Configuration module for promoreel."""

from .loader import find_config_file, load_settings
from .settings import (
    APISettings,
    AssetSettings,
    OutputSettings,
    ProductSettings,
    Settings,
    VideoSettings,
)

__all__ = [
    "APISettings",
    "AssetSettings",
    "OutputSettings",
    "ProductSettings",
    "Settings",
    "VideoSettings",
    "find_config_file",
    "load_settings",
]
