"""Config command: view current configuration settings."""

import typer
from rich.markup import escape

from promoreel.cli.ui.console import (
    console,
    print_header,
    print_key_value_table,
    print_muted,
)
from promoreel.cli.ui.setup import load_settings_or_exit, run_setup_check


def config(
    check: bool = typer.Option(
        False,
        "--check",
        help="Validate that the required API keys are set.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """View current configuration and validate setup.

    Displays all configuration values loaded from environment
    variables and config files. API keys are masked for security.
    """
    settings = load_settings_or_exit(config_file)

    if check:
        if not run_setup_check(settings):
            raise typer.Exit(code=1)
        return

    print_header("PromoReel Configuration")

    anthropic = settings.api.anthropic_api_key.get_secret_value()
    gemini = settings.api.gemini_api_key.get_secret_value()
    print_key_value_table(
        "API",
        {
            "ANTHROPIC_API_KEY": _mask_key(anthropic) if anthropic else "[red]not set[/red]",
            "GEMINI_API_KEY": _mask_key(gemini) if gemini else "[red]not set[/red]",
            "Idea Model": settings.api.anthropic_model,
        },
    )
    console.print()

    print_key_value_table(
        "Video Generation",
        {
            "Single-Image Model": settings.video.single_image_model,
            "Multi-Image Model": settings.video.multi_image_model,
            "Resolution": settings.video.resolution,
            "Aspect Ratio": settings.video.aspect_ratio,
            "Poll Interval": f"{settings.video.poll_interval:g}s",
            "Max Poll Attempts": str(settings.video.max_poll_attempts or "unlimited"),
        },
    )
    console.print()

    print_key_value_table(
        "Product Images",
        {
            "Preloaded Source": settings.assets.preloaded_source,
            "Preloaded Images": str(len(settings.assets.preloaded_images)),
            "Max Uploads": str(settings.assets.max_uploads),
            "Max Selection": str(settings.assets.max_selection),
        },
    )
    console.print()

    print_key_value_table(
        "Product",
        {
            "Description": escape(_truncate(settings.product.description.splitlines()[0])),
            "Features": escape(", ".join(settings.product.features)) or "[dim]none[/dim]",
            "Output Directory": settings.output_dir,
        },
    )

    print_muted("\nTip: use 'promoreel config --check' to validate your setup.")
    print_muted("Config file: use --config to specify a custom YAML config.")


def _mask_key(key: str) -> str:
    """Mask an API key, showing only the last 4 characters."""
    if len(key) <= 4:
        return "****"
    return f"{'*' * (len(key) - 4)}{key[-4:]}"


def _truncate(text: str, limit: int = 60) -> str:
    return text if len(text) <= limit else f"{text[: limit - 3]}..."
