"""Where: src/modproxy/platform/proxy/user_agent.py
What: Build the User-Agent header sent to module proxies.
Why: Centralise client identification shared by transports and the CLI.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from modproxy import __version__

DEFAULT_APP_NAME: Final[str] = "modproxy"
_ENV_USER_AGENT: Final[str] = "MODPROXY_USER_AGENT"


def format_user_agent(app_name: str, app_version: str, contact: str) -> str:
    """Return ``App/Version (contact)`` when contact information is available."""

    stripped = contact.strip()
    if stripped:
        return f"{app_name}/{app_version} ({stripped})"
    return f"{app_name}/{app_version}"


def default_user_agent(env: Mapping[str, str] | None = None) -> str:
    """User agent used when a client is built without an explicit one."""

    mapping = env if env is not None else os.environ
    override = (mapping.get(_ENV_USER_AGENT) or "").strip()
    if override:
        return override
    return format_user_agent(DEFAULT_APP_NAME, __version__, "")


__all__ = ["DEFAULT_APP_NAME", "default_user_agent", "format_user_agent"]
