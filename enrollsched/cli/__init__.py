"""Command-line interface for enrollsched."""

from .commands import main

__all__ = ["main"]
