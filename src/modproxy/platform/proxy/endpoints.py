"""
Summary: Compose canonical proxy resource URLs.
Why: Keep the proxy URL layout in one place for every resolver.
"""

from __future__ import annotations

from enum import Enum


class ResourceKind(str, Enum):
    """Per-version resources served under ``{module}/@v/``."""

    INFO = "info"
    ZIP = "zip"


def clean_url(base: str) -> str:
    """Strip every trailing ``/`` from ``base``."""

    return base.rstrip("/")


def build_url(base: str, encoded_path: str, encoded_version: str, kind: ResourceKind) -> str:
    """Return ``{base}/{encoded_path}/@v/{encoded_version}.{kind}``.

    Both identity components must already be escaped.
    """

    return f"{clean_url(base)}/{encoded_path}/@v/{encoded_version}.{kind.value}"


__all__ = ["ResourceKind", "build_url", "clean_url"]
