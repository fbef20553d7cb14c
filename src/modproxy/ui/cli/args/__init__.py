"""Command line argument handling package."""

from modproxy.ui.cli.args.parser import ArgumentParser
from modproxy.ui.cli.args.options import CLIArgs, ConfigArgs, EscapeArgs, FilesArgs, InfoArgs

__all__ = ["ArgumentParser", "CLIArgs", "ConfigArgs", "EscapeArgs", "FilesArgs", "InfoArgs"]
