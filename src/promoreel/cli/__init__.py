"""Command-line interface for promoreel."""
