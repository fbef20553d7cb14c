"""Configuration management for modproxy."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, ClassVar, Final

from modproxy.config.file_ops import write_text_file
from modproxy.config.paths import default_config_path, default_log_file
from modproxy.platform.logging import logger

DEFAULT_PROXY_URL: Final[str] = "https://proxy.golang.org"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0
_ENV_PROXY_URL: Final[str] = "MODPROXY_URL"


def _path_field(default: Path | None = None) -> Any:
    """Create a field for Path objects with proper conversion."""
    return field(default=default, metadata={"path": True})


@dataclass
class Config:
    """Application configuration."""

    # Module proxy endpoint
    proxy_url: str = DEFAULT_PROXY_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    # User-Agent identity
    app_name: str | None = None
    app_version: str | None = None
    contact: str | None = None

    # Log file path
    log_file: Path | None = _path_field()

    _instance: ClassVar["Config | None"] = None
    _cache_key: ClassVar[tuple[Path, str] | None] = None

    def __post_init__(self) -> None:
        """Convert string paths to ``Path`` objects using field metadata."""

        for f in fields(self):
            if not f.metadata.get("path", False):
                continue
            value = getattr(self, f.name)
            if isinstance(value, str):
                setattr(self, f.name, Path(value) if value else None)

    def save(self, path: Path | None = None) -> Path:
        """Save configuration to ``path`` (defaults to the portable location)."""

        config_dict = asdict(self)
        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)

        target = path or default_config_path()
        try:
            write_text_file(target, self._render_toml(config_dict))
        except OSError as e:
            logger.error("Failed to save configuration: %s", e)
            raise
        logger.info("Configuration saved to %s", target)
        return target

    def _render_toml(self, config: dict[str, Any]) -> str:
        """Render configuration as TOML with inline guidance."""

        lines: list[str] = []

        lines.append("# modproxy configuration file")
        lines.append("")

        lines.append("# Base URL of the module proxy")
        lines.append("# Overridden by the MODPROXY_URL environment variable")
        lines.append(f"proxy_url = {self._format_toml_value(config['proxy_url'])}")
        lines.append("")

        lines.append("# Per-request timeout in seconds")
        lines.append(f"timeout_seconds = {self._format_toml_value(config['timeout_seconds'])}")
        lines.append("")

        lines.append("# User-Agent identity (optional)")
        lines.append('# Sent as "app_name/app_version (contact)"')
        for key in ("app_name", "app_version", "contact"):
            if config.get(key):
                lines.append(f"{key} = {self._format_toml_value(config[key])}")
        lines.append("")

        lines.append("# Log file path (optional)")
        lines.append(f"# Example: log_file = {self._format_toml_value(default_log_file())}")
        if config["log_file"] is not None:
            lines.append(f"log_file = {self._format_toml_value(config['log_file'])}")
        lines.append("")

        return "\n".join(lines)

    def _format_toml_value(self, value: Any) -> str:
        """Format a value for TOML serialization."""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, Path)):
            escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return str(value)

    @classmethod
    def load(cls, path: Path | None = None, env: Mapping[str, str] | None = None) -> "Config":
        """Load configuration from ``path`` or the default location.

        A missing file yields defaults. ``MODPROXY_URL`` overrides ``proxy_url``.
        The instance is cached per file and override value.

        Raises:
            tomllib.TOMLDecodeError: The file is not valid TOML.
        """
        config_file = (path or default_config_path(env)).expanduser().resolve()
        mapping = env if env is not None else os.environ
        override = (mapping.get(_ENV_PROXY_URL) or "").strip()
        cache_key = (config_file, override)
        if cls._instance is not None and cls._cache_key == cache_key:
            return cls._instance

        config_dict: dict[str, Any] = {}
        if config_file.exists():
            try:
                with open(config_file, "rb") as f:
                    config_dict = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                logger.error("Failed to load configuration: %s", e)
                raise
            logger.debug("Configuration loaded from %s", config_file)
        else:
            logger.debug("No configuration at %s, using defaults", config_file)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))
        values = {key: value for key, value in config_dict.items() if key in known}

        if override:
            values["proxy_url"] = override

        instance = cls(**values)
        cls._instance = instance
        cls._cache_key = cache_key
        return instance


__all__ = ["Config", "DEFAULT_PROXY_URL", "DEFAULT_TIMEOUT_SECONDS"]
