"""Rich console handler for proxy request events.

Where: platform/logging/handlers.py
What: Render structured ``proxy_event`` records with icons and compact URLs.
Why: Keep request traces readable when long module paths are involved.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, override
from urllib.parse import urlsplit

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class ProxyRichHandler(RichHandler):
    """Rich handler that styles proxy request records."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "proxy.request.start": ("→", "cyan"),
        "proxy.request.complete": ("←", "green"),
    }
    _URL_SEGMENT_LIMIT: ClassVar[int] = 4

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    def _format_url(self, url: str) -> Text:
        """Keep the host and the last few path segments of ``url``."""

        parts = urlsplit(url)
        segments = [segment for segment in parts.path.split("/") if segment]
        truncated = len(segments) > self._URL_SEGMENT_LIMIT
        if truncated:
            segments = segments[-self._URL_SEGMENT_LIMIT:]

        text = Text()
        if parts.netloc:
            _ = text.append(parts.netloc, style=Style(color="white", bold=True))
        _ = text.append("/", style=Style(color="magenta"))
        if truncated:
            _ = text.append("…/", style=Style(color="magenta"))
        for index, segment in enumerate(segments):
            if index:
                _ = text.append("/", style=Style(color="magenta"))
            _ = text.append(segment, style=Style(color="white"))
        return text

    def _render_proxy_message(self, record: logging.LogRecord) -> Text | None:
        event = getattr(record, "proxy_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("•", "blue"))
        status = getattr(record, "status", None)
        if isinstance(status, int) and status != 200:
            color = "yellow" if status < 500 else "red"

        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))
        _ = text.append("GET ", style=Style(color=color))

        url = getattr(record, "url", None)
        if isinstance(url, str):
            _ = text.append_text(self._format_url(url))

        details: list[str] = []
        if isinstance(status, int):
            details.append(str(status))
        duration_ms = getattr(record, "duration_ms", None)
        if isinstance(duration_ms, (int, float)):
            details.append(f"{duration_ms:.1f} ms")
        if details:
            _ = text.append(" (" + ", ".join(details) + ")", style=Style(color=color))
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        proxy_text = self._render_proxy_message(record)
        if proxy_text is not None:
            return proxy_text
        return super().render_message(record, message)


__all__ = ["ProxyRichHandler"]
