"""
Summary: In-memory access to module zip archives served by the proxy.
Why: Hand callers entry names and contents without touching the filesystem.
"""

from __future__ import annotations

import io
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from types import TracebackType
from typing import IO, final

from .errors import CorruptArchiveError


@dataclass(slots=True, frozen=True)
class ArchiveEntry:
    """Directory record for one archive member."""

    name: str
    size: int
    compressed_size: int
    is_dir: bool


@final
class ArchiveHandle:
    """Read-only view over a zip archive held in memory.

    Entry names are exactly those stored in the archive, normally
    ``{module}@{version}/{relative path}``.
    """

    def __init__(self, archive: zipfile.ZipFile, *, source_url: str = "") -> None:
        self._archive: zipfile.ZipFile = archive
        self.source_url: str = source_url
        self._entries: tuple[ArchiveEntry, ...] = tuple(
            ArchiveEntry(
                name=info.filename,
                size=info.file_size,
                compressed_size=info.compress_size,
                is_dir=info.is_dir(),
            )
            for info in archive.infolist()
        )

    @property
    def entries(self) -> tuple[ArchiveEntry, ...]:
        return self._entries

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def read(self, name: str) -> bytes:
        """Return the decompressed content of ``name``.

        Raises:
            KeyError: No entry named ``name``.
            CorruptArchiveError: The entry data is damaged.
        """

        try:
            return self._archive.read(name)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, zlib.error) as exc:
            raise CorruptArchiveError(self.source_url, f"{name}: {exc}") from exc

    def open(self, name: str) -> IO[bytes]:
        """Open ``name`` for streaming reads."""

        return self._archive.open(name)

    def close(self) -> None:
        self._archive.close()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ArchiveEntry]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __enter__(self) -> "ArchiveHandle":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ArchiveHandle(entries={len(self._entries)})"


def open_archive(data: bytes, *, url: str) -> ArchiveHandle:
    """Parse ``data`` as a zip archive fetched from ``url``.

    Raises:
        CorruptArchiveError: ``data`` is not a readable zip archive.
    """

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, ValueError) as exc:
        raise CorruptArchiveError(url, str(exc) or "not a zip archive") from exc
    return ArchiveHandle(archive, source_url=url)


__all__ = ["ArchiveEntry", "ArchiveHandle", "open_archive"]
