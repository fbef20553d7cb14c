"""Command line interface package."""

from modproxy.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
