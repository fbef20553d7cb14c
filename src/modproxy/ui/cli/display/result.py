"""src/modproxy/ui/cli/display/result.py
What: Render proxy lookups for the command line.
Why: Keep console output formatting consistent across subcommands.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import final

from rich.console import Console
from rich.table import Table

from modproxy.config.config import Config
from modproxy.platform.proxy import ArchiveHandle, VersionInfo


@final
class ResultDisplay:
    """Handles result display in CLI."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(soft_wrap=True)

    def show_info(self, module_path: str, info: VersionInfo, *, as_json: bool = False) -> None:
        """Display version metadata.

        Args:
            module_path: Module the metadata belongs to.
            info: Metadata returned by the proxy.
            as_json: Print the proxy's JSON shape instead of a table.
        """
        if as_json:
            self.console.print_json(data=info.to_payload())
            return

        table = Table(show_header=False, box=None)
        table.add_column(style="bold cyan")
        table.add_column()
        table.add_row("Module", module_path)
        table.add_row("Version", info.version)
        table.add_row("Time", info.time.isoformat())
        self.console.print(table)

    def show_files(self, archive: ArchiveHandle, *, prefix: str, strip_prefix: bool = False) -> None:
        """List archive entries with their uncompressed sizes."""

        if len(archive) == 0:
            self.console.print("Archive contains no files.")
            return

        for entry in archive:
            name = entry.name
            if strip_prefix and name.startswith(prefix):
                name = name[len(prefix):]
            self.console.print(f"{entry.size:>10}  {name}", highlight=False)
        self.console.print(f"{len(archive)} entries", style="dim")

    def show_identity(self, module_path: str, version: str | None) -> None:
        self.console.print(module_path, highlight=False)
        if version is not None:
            self.console.print(version, highlight=False)

    def show_config(self, config: Config) -> None:
        table = Table(show_header=False, box=None)
        table.add_column(style="bold cyan")
        table.add_column()
        for key, value in asdict(config).items():
            table.add_row(key, "" if value is None else str(value))
        self.console.print(table)
