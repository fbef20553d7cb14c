"""Command line argument options."""

from dataclasses import dataclass
from typing import Literal, final


@final
@dataclass(slots=True)
class InfoArgs:
    """Command line arguments for the ``info`` subcommand."""

    command: Literal["info"]
    module_path: str
    version: str
    proxy_url: str
    timeout: float
    as_json: bool


@final
@dataclass(slots=True)
class FilesArgs:
    """Command line arguments for the ``files`` subcommand."""

    command: Literal["files"]
    module_path: str
    version: str
    proxy_url: str
    timeout: float
    strip_prefix: bool


@final
@dataclass(slots=True)
class EscapeArgs:
    """Command line arguments for the ``escape`` and ``unescape`` subcommands."""

    command: Literal["escape", "unescape"]
    module_path: str
    version: str | None


@final
@dataclass(slots=True)
class ConfigArgs:
    """Command line arguments for the ``config`` subcommand."""

    command: Literal["config"]
    write: bool


CLIArgs = InfoArgs | FilesArgs | EscapeArgs | ConfigArgs

__all__ = ["CLIArgs", "ConfigArgs", "EscapeArgs", "FilesArgs", "InfoArgs"]
