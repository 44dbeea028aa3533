"""promoreel: guided AI promotional video generation."""

__version__ = "0.1.0"
