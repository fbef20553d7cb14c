"""
Summary: Case-escaping of module paths and versions for proxy URLs.
Why: Keep case-sensitive identities distinct on case-insensitive stores.
"""

from __future__ import annotations

from typing import Final

from .errors import InvalidInputError

ESCAPE_MARKER: Final[str] = "!"


def _escape(value: str, *, kind: str) -> str:
    if not value:
        raise InvalidInputError(value, f"empty {kind}")
    if ESCAPE_MARKER in value:
        raise InvalidInputError(value, f"{kind} already escaped")

    out: list[str] = []
    for char in value:
        if "A" <= char <= "Z":
            out.append(ESCAPE_MARKER)
            out.append(char.lower())
        else:
            out.append(char)
    return "".join(out)


def _unescape(encoded: str, *, kind: str) -> str:
    if not encoded:
        raise InvalidInputError(encoded, f"empty {kind}")

    out: list[str] = []
    pending_marker = False
    for char in encoded:
        if pending_marker:
            if not "a" <= char <= "z":
                raise InvalidInputError(encoded, f"invalid escape sequence in {kind}")
            out.append(char.upper())
            pending_marker = False
            continue
        if char == ESCAPE_MARKER:
            pending_marker = True
            continue
        if "A" <= char <= "Z":
            raise InvalidInputError(encoded, f"unescaped uppercase letter in {kind}")
        out.append(char)

    if pending_marker:
        raise InvalidInputError(encoded, f"trailing escape marker in {kind}")
    return "".join(out)


def escape_path(path: str) -> str:
    """Return ``path`` with every ASCII uppercase letter replaced by ``!`` + lowercase.

    Raises:
        InvalidInputError: ``path`` is empty or already contains ``!``.
    """

    return _escape(path, kind="path")


def escape_version(version: str) -> str:
    """Escape ``version`` with the same rules as :func:`escape_path`."""

    return _escape(version, kind="version")


def unescape_path(encoded: str) -> str:
    """Invert :func:`escape_path`.

    Raises:
        InvalidInputError: ``encoded`` is not a valid escaped path.
    """

    return _unescape(encoded, kind="path")


def unescape_version(encoded: str) -> str:
    """Invert :func:`escape_version`."""

    return _unescape(encoded, kind="version")


def encode_module_path_and_version(path: str, version: str) -> tuple[str, str]:
    """Escape a module path and version for use in proxy URLs."""

    return escape_path(path), escape_version(version)


def decode_module_path_and_version(encoded_path: str, encoded_version: str) -> tuple[str, str]:
    """Recover the raw module path and version from their escaped forms."""

    return unescape_path(encoded_path), unescape_version(encoded_version)


__all__ = [
    "ESCAPE_MARKER",
    "decode_module_path_and_version",
    "encode_module_path_and_version",
    "escape_path",
    "escape_version",
    "unescape_path",
    "unescape_version",
]
