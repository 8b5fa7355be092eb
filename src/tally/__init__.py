"""Tally: personal net worth tracking core."""

__version__ = "0.1.0"
