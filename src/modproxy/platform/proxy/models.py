"""
Summary: Value objects exchanged with the module proxy.
Why: Give resolvers and callers immutable, typed records per call.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Final

from .escaping import escape_path, escape_version

# Go emits nanoseconds; datetime keeps microseconds.
_EXCESS_FRACTION: Final[re.Pattern[str]] = re.compile(r"(\.\d{6})\d+")


@dataclass(slots=True, frozen=True)
class ModuleIdentity:
    """A module version in both raw and escaped form."""

    raw_path: str
    raw_version: str
    encoded_path: str
    encoded_version: str

    @classmethod
    def from_raw(cls, path: str, version: str) -> "ModuleIdentity":
        """Escape ``path`` and ``version``; raises ``InvalidInputError`` on bad input."""

        return cls(
            raw_path=path,
            raw_version=version,
            encoded_path=escape_path(path),
            encoded_version=escape_version(version),
        )

    def __str__(self) -> str:
        return f"{self.raw_path}@{self.raw_version}"


@dataclass(slots=True, frozen=True)
class VersionInfo:
    """Metadata served by the ``.info`` endpoint."""

    version: str
    time: datetime

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "VersionInfo":
        """Build from the decoded JSON object ``{"Version": ..., "Time": ...}``.

        Raises:
            ValueError: A field is missing, has the wrong type, or ``Time``
                is not an RFC 3339 timestamp.
        """

        version = payload.get("Version")
        if not isinstance(version, str) or not version:
            raise ValueError("missing or invalid 'Version' field")

        raw_time = payload.get("Time")
        if not isinstance(raw_time, str):
            raise ValueError("missing or invalid 'Time' field")

        return cls(version=version, time=parse_rfc3339(raw_time))

    def to_payload(self) -> dict[str, str]:
        return {
            "Version": self.version,
            "Time": self.time.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
        }


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC ``datetime``."""

    try:
        parsed = datetime.fromisoformat(_EXCESS_FRACTION.sub(r"\1", value.upper()))
    except ValueError as exc:
        raise ValueError(f"invalid RFC 3339 timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no UTC offset")
    return parsed.astimezone(timezone.utc)


__all__ = ["ModuleIdentity", "VersionInfo", "parse_rfc3339"]
