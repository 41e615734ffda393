"""Command-line front-end (``python -m sheet_extractor.cli``)."""

from .app import main

__all__ = ["main"]
