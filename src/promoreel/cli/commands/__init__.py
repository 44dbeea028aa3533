"""CLI commands for promoreel."""

from .config_cmd import config
from .wizard import wizard

__all__ = [
    "config",
    "wizard",
]
