"""Main Typer application for the promoreel CLI."""

import logging

import typer
from rich.logging import RichHandler

from promoreel import __version__
from promoreel.cli.commands.config_cmd import config
from promoreel.cli.commands.wizard import wizard
from promoreel.cli.ui.console import console

app = typer.Typer(
    name="promoreel",
    help="Create short AI-generated promotional videos for a product.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"promoreel version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    if verbose:
        # SDK transport chatter drowns out the workflow at DEBUG
        for name in ("httpx", "httpcore", "anthropic", "google_genai"):
            logging.getLogger(name).setLevel(logging.INFO)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show debug logging.",
    ),
) -> None:
    """PromoReel: AI promo video wizard.

    Pick product images, let Claude propose three video ideas, refine the
    one you like, and generate the final clip with Google Veo.

    Quick start: run [bold]promoreel wizard[/bold].

    Setup: run [bold]promoreel config --check[/bold] to verify API keys
    are configured.
    """
    configure_logging(verbose)


app.command()(wizard)
app.command()(config)
