"""Startup checks for the CLI: config file, API keys and product images."""

from pathlib import Path

import typer

from promoreel.config import load_settings
from promoreel.config.settings import AssetSettings, Settings
from promoreel.errors import ConfigurationError

from .console import (
    console,
    print_error,
    print_info,
    print_muted,
    print_success,
)

_KEY_HELP: dict[str, str] = {
    "ANTHROPIC_API_KEY": (
        "ANTHROPIC_API_KEY is not set (needed for video ideas). "
        "Get one at https://console.anthropic.com/settings/keys"
    ),
    "GEMINI_API_KEY": (
        "GEMINI_API_KEY is not set (needed for Veo; the wizard can ask for it). "
        "Get one at https://aistudio.google.com/apikey"
    ),
}


def load_settings_or_exit(config_file: str | None) -> Settings:
    """Load settings for a command, exiting with status 1 on a bad config file."""
    try:
        return load_settings(config_file)
    except ConfigurationError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1) from exc


def missing_preloaded_images(assets: AssetSettings) -> list[str] | None:
    """Configured preloaded files absent from a local source directory.

    Returns:
        None when the source is a URL (not checked), otherwise the missing
        file names; every name is missing when the directory does not exist.
    """
    source = assets.preloaded_source
    if source.startswith(("http://", "https://")):
        return None
    directory = Path(source)
    return [name for name in assets.preloaded_images if not (directory / name).is_file()]


def run_setup_check(settings: Settings) -> bool:
    """Report missing API keys and product images.

    Only the keys are required; missing preloaded images are reported as
    information since uploads still work.

    Returns:
        True if all required configuration is present, False otherwise.
    """
    missing_keys = settings.get_missing_api_keys()
    if missing_keys:
        print_error("Missing required API keys:")
        console.print()
        for key in missing_keys:
            print_error(_KEY_HELP[key])
        console.print()
        print_info("Set them in a .env file or export them in your shell.")
        if not Path(".env").exists() and Path(".env.example").exists():
            print_muted("  cp .env.example .env   (then fill in the keys)")
        console.print()

    missing_images = missing_preloaded_images(settings.assets)
    total = len(settings.assets.preloaded_images)
    if missing_images is None:
        print_muted(f"Preloaded images are fetched from {settings.assets.preloaded_source}")
    elif missing_images:
        print_info(
            f"{len(missing_images)} of {total} preloaded images not found in "
            f"{settings.assets.preloaded_source}. Only the others and uploads "
            "will be available."
        )

    if not missing_keys:
        print_success("All required configuration is present.")
    return not missing_keys


def require_idea_key(settings: Settings) -> bool:
    """Check the Claude key the wizard cannot run without, printing help if absent.

    The Gemini key is not checked here: the wizard asks for it when a
    video is first generated.
    """
    if settings.api.anthropic_api_key.get_secret_value():
        return True
    print_error(_KEY_HELP["ANTHROPIC_API_KEY"])
    console.print()
    print_muted("  See: promoreel config --check")
    return False
