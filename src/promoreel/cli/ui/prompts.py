"""User input prompts and confirmation dialogs for promoreel CLI."""

import typer

from .console import console


def prompt_user_input(message: str = "> ") -> str:
    """Prompt the user for text input.

    Args:
        message: The prompt string displayed to the user.

    Returns:
        The user's input string, stripped of leading/trailing whitespace.
    """
    return console.input(f"[bold]{message}[/bold]").strip()


def prompt_secret(message: str) -> str:
    """Prompt for a secret value without echoing it."""
    return console.input(f"[bold]{message}[/bold]", password=True).strip()


def confirm_action(message: str, default: bool = False) -> bool:
    """Ask the user to confirm an action.

    Args:
        message: The confirmation question.
        default: Default answer if user just presses Enter.

    Returns:
        True if user confirmed, False otherwise.
    """
    return typer.confirm(message, default=default)
