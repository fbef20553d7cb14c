"""
Summary: Error taxonomy raised by the module proxy client.
Why: Let callers branch on failure kind instead of matching message text.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Final

_NOT_FOUND_STATUSES: Final[frozenset[int]] = frozenset({HTTPStatus.NOT_FOUND, HTTPStatus.GONE})


def go_quote(value: str) -> str:
    """Quote ``value`` the way Go's ``%q`` verb does for printable text."""

    parts: list[str] = ['"']
    for char in value:
        if char == '"':
            parts.append('\\"')
        elif char == "\\":
            parts.append("\\\\")
        elif char == "\n":
            parts.append("\\n")
        elif char == "\r":
            parts.append("\\r")
        elif char == "\t":
            parts.append("\\t")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\x{ord(char):02x}")
        else:
            parts.append(char)
    parts.append('"')
    return "".join(parts)


class ProxyClientError(Exception):
    """Base class for every failure surfaced by the proxy client."""


class InvalidInputError(ProxyClientError, ValueError):
    """A module path or version cannot be encoded or decoded."""

    def __init__(self, value: str, reason: str) -> None:
        self.value: str = value
        self.reason: str = reason
        super().__init__(f"invalid input {go_quote(value)}: {reason}")


class TransportError(ProxyClientError):
    """The request never produced a usable HTTP response."""

    def __init__(self, url: str, reason: str) -> None:
        self.url: str = url
        self.reason: str = reason
        super().__init__(f"http.Get({go_quote(url)}) failed: {reason}")


class ProxyError(ProxyClientError):
    """The proxy answered with a status other than 200 OK."""

    def __init__(self, url: str, status_code: int, status_text: str) -> None:
        self.url: str = url
        self.status_code: int = status_code
        self.status_text: str = status_text
        super().__init__(
            f"http.Get({go_quote(url)}) returned response: {status_code} ({go_quote(status_text)})"
        )

    @property
    def not_found(self) -> bool:
        return self.status_code in _NOT_FOUND_STATUSES

    @classmethod
    def from_status(cls, url: str, status_code: int, status_text: str) -> "ProxyError":
        """Build the most specific error for ``status_code``."""

        if status_code in _NOT_FOUND_STATUSES:
            return NotFoundError(url, status_code, status_text)
        return cls(url, status_code, status_text)


class NotFoundError(ProxyError):
    """The proxy does not serve the requested module or version."""


class DecodeError(ProxyClientError):
    """A 200 response carried a body that could not be interpreted."""

    def __init__(self, url: str, reason: str) -> None:
        self.url: str = url
        self.reason: str = reason
        super().__init__(f"decoding response from {go_quote(url)}: {reason}")


class InfoDecodeError(DecodeError):
    """The ``.info`` payload is not valid version metadata."""


class CorruptArchiveError(DecodeError):
    """The ``.zip`` payload is not a readable zip archive."""


__all__ = [
    "CorruptArchiveError",
    "DecodeError",
    "InfoDecodeError",
    "InvalidInputError",
    "NotFoundError",
    "ProxyClientError",
    "ProxyError",
    "TransportError",
    "go_quote",
]
