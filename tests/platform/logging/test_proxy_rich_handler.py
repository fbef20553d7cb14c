"""Tests for the ``ProxyRichHandler`` request rendering."""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.text import Text

from modproxy.platform.logging import ProxyRichHandler, setup_logger


def _make_handler() -> ProxyRichHandler:
    """Create a handler instance with an in-memory console."""

    console = Console(file=StringIO(), force_terminal=True, soft_wrap=True)
    return ProxyRichHandler(console=console)


def _build_record(**extras: Any) -> logging.LogRecord:
    record = logging.LogRecord(
        name="modproxy",
        level=logging.DEBUG,
        pathname="test",
        lineno=0,
        msg="GET %s",
        args=("x",),
        exc_info=None,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


def test_render_message_shortens_long_urls() -> None:
    handler = _make_handler()
    record = _build_record(
        proxy_event="proxy.request.complete",
        url="https://proxy.golang.org/github.com/!azure/go-autorest/autorest/@v/v0.9.0.zip",
        status=200,
        duration_ms=12.345,
    )

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)
    plain = rendered.plain
    assert plain.startswith("← GET proxy.golang.org/…/")
    assert plain.endswith("go-autorest/autorest/@v/v0.9.0.zip (200, 12.3 ms)")


def test_render_message_keeps_short_urls() -> None:
    handler = _make_handler()
    record = _build_record(proxy_event="proxy.request.start", url="http://h/my.mod/@v/v1.0.0.info")

    plain = handler.render_message(record, "").plain
    assert plain == "→ GET h/my.mod/@v/v1.0.0.info"


def test_error_status_changes_colour() -> None:
    handler = _make_handler()
    record = _build_record(proxy_event="proxy.request.complete", url="http://h/x", status=503)

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)
    assert any("red" in str(span.style) for span in rendered.spans)


def test_plain_records_use_default_rendering() -> None:
    handler = _make_handler()
    record = _build_record()

    rendered = handler.render_message(record, "plain message")
    assert isinstance(rendered, Text)
    assert rendered.plain == "plain message"


def test_setup_logger_replaces_handlers_and_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "modproxy.log"
    console = Console(file=StringIO())

    logger = setup_logger(log_file=log_file, console_level=logging.WARNING, console=console)
    logger = setup_logger(log_file=log_file, console_level=logging.WARNING, console=console)
    try:
        assert len(logger.handlers) == 2
        logger.debug("hello file")
        for handler in logger.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
        assert "hello file" not in console.file.getvalue()  # type: ignore[attr-defined]
    finally:
        _ = setup_logger()
