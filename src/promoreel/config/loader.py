"""YAML configuration loading for promoreel.

A config file holds up to four sections, ``video``, ``assets``,
``product`` and ``output``, each mapping onto one settings model. API
keys never come from the file; they are read from the environment or
``.env`` by ``APISettings``. Unknown sections or keys are rejected so a
misplaced option (``aspect_ratio`` under ``assets``, say) is reported
instead of silently ignored.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from promoreel.errors import ConfigurationError

from .settings import (
    AssetSettings,
    OutputSettings,
    ProductSettings,
    Settings,
    VideoSettings,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ["config.yaml", "config.yml", "promoreel.yaml", "promoreel.yml"]

SECTIONS: dict[str, type[BaseModel]] = {
    "video": VideoSettings,
    "assets": AssetSettings,
    "product": ProductSettings,
    "output": OutputSettings,
}


def find_config_file(
    config_path: Path | str | None = None, search_dir: Path | None = None
) -> Path | None:
    """Return the explicit config path, or the first default file found.

    Raises:
        ConfigurationError: If an explicit path does not exist.
    """
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
        return path

    search_dir = search_dir or Path.cwd()
    for filename in DEFAULT_CONFIG_FILES:
        path = search_dir / filename
        if path.is_file():
            return path
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML config file into a mapping of sections.

    Raises:
        ConfigurationError: Invalid YAML, or a top level that is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"{path}: invalid YAML: {exc}") from exc

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"{path}: expected a mapping of sections at the top level")
    return content


def build_section(name: str, values: Any, source: Path | str = "config") -> BaseModel:
    """Validate one config section against its settings model.

    Raises:
        ConfigurationError: Unknown section, unknown key, or invalid value.
    """
    model = SECTIONS.get(name)
    if model is None:
        hint = " API keys belong in the environment or .env." if name == "api" else ""
        raise ConfigurationError(
            f"{source}: unknown section {name!r} "
            f"(expected one of: {', '.join(SECTIONS)}).{hint}"
        )
    if values is None:
        values = {}
    if not isinstance(values, dict):
        raise ConfigurationError(f"{source}: section {name!r} must be a mapping")

    unknown = sorted(set(values) - set(model.model_fields))
    if unknown:
        raise ConfigurationError(
            f"{source}: unknown {name} setting(s): {', '.join(unknown)} "
            f"(allowed: {', '.join(model.model_fields)})"
        )
    try:
        return model(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"{source}: invalid {name} settings:\n{exc}") from exc


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from the config file (if any) and the environment.

    Raises:
        ConfigurationError: If the config file is missing or invalid.
    """
    path = find_config_file(config_path)
    if path is None:
        logger.debug("No config file found; using defaults")
        return Settings()

    logger.debug("Loading config from %s", path)
    sections = {
        name: build_section(name, values, path)
        for name, values in read_config_file(path).items()
    }
    return Settings(**sections)
