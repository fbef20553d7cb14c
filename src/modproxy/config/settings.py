"""Where: src/modproxy/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated values to the proxy client without file I/O.
Trade-offs: - Validation is limited to simple boundary checks.
"""

from __future__ import annotations

import math

from modproxy import __version__
from modproxy.config.config import DEFAULT_TIMEOUT_SECONDS, Config
from modproxy.platform.proxy.user_agent import (
    DEFAULT_APP_NAME,
    default_user_agent,
    format_user_agent,
)


def resolve_timeout(config: Config) -> float:
    """Return the configured timeout, falling back on non-positive values."""

    value = config.timeout_seconds
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_TIMEOUT_SECONDS
    if not math.isfinite(value) or value <= 0:
        return DEFAULT_TIMEOUT_SECONDS
    return float(value)


def resolve_user_agent(config: Config) -> str:
    """Build the User-Agent from the configured identity.

    Without any configured identity the environment override or the
    package default applies.
    """

    app_name = (config.app_name or "").strip()
    app_version = (config.app_version or "").strip()
    contact = (config.contact or "").strip()
    if not (app_name or app_version or contact):
        return default_user_agent()
    return format_user_agent(app_name or DEFAULT_APP_NAME, app_version or __version__, contact)


__all__ = ["resolve_timeout", "resolve_user_agent"]
