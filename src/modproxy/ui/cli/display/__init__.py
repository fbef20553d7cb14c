"""Display management for CLI interface."""

from modproxy.ui.cli.display.result import ResultDisplay

__all__ = ["ResultDisplay"]
