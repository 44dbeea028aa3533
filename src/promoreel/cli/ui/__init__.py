"""CLI UI components for promoreel."""

from .console import (
    console,
    print_error,
    print_header,
    print_info,
    print_key_value_table,
    print_markdown,
    print_muted,
    print_success,
    print_warning,
)
from .progress import spinner, styled
from .prompts import confirm_action, prompt_secret, prompt_user_input
from .setup import load_settings_or_exit, require_idea_key, run_setup_check

__all__ = [
    "confirm_action",
    "console",
    "load_settings_or_exit",
    "print_error",
    "print_header",
    "print_info",
    "print_key_value_table",
    "print_markdown",
    "print_muted",
    "print_success",
    "print_warning",
    "prompt_secret",
    "prompt_user_input",
    "require_idea_key",
    "run_setup_check",
    "spinner",
    "styled",
]
