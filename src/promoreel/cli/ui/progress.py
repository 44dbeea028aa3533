"""Spinner wrapper for promoreel CLI."""

from collections.abc import Generator
from contextlib import contextmanager

from rich.status import Status

from .console import BRAND_COLOR, console


@contextmanager
def spinner(message: str) -> Generator[Status, None, None]:
    """Display a spinner with a message while a block executes.

    The yielded ``Status`` can be updated with new text::

        with spinner("Initiating...") as status:
            status.update(styled("Checking video status..."))
    """
    with console.status(styled(message)) as status:
        yield status


def styled(message: str) -> str:
    """Wrap a status message in the brand color."""
    return f"[{BRAND_COLOR}]{message}[/{BRAND_COLOR}]"
