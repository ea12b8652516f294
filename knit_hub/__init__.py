"""Knit Community Hub desktop application package."""

__version__ = "0.1.0"
