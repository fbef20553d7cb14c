"""Loopback module proxy for exercising the client in tests.

``FakeProxyServer`` serves ``.info`` and ``.zip`` resources for a set of
``FakeModuleVersion`` definitions under their escaped URLs and answers
404 for everything else. Arbitrary raw responses can be registered with
``add_route`` to simulate misbehaving proxies.
"""

from __future__ import annotations

import contextlib
import http.server
import io
import json
import threading
import time
import zipfile
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import TracebackType
from typing import Any, Final
from urllib.parse import unquote, urlsplit

from modproxy.platform.proxy.endpoints import ResourceKind, build_url
from modproxy.platform.proxy.escaping import encode_module_path_and_version
from modproxy.platform.proxy.models import VersionInfo


@dataclass(slots=True, frozen=True)
class FakeModuleVersion:
    """One module version served by the fake proxy."""

    path: str
    version: str
    time: datetime
    files: Mapping[str, str] = field(default_factory=dict)

    def info_payload(self) -> bytes:
        return json.dumps(VersionInfo(self.version, self.time).to_payload()).encode("utf-8")

    def zip_bytes(self) -> bytes:
        """Zip ``files`` with every entry prefixed ``{path}@{version}/``."""

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, content in self.files.items():
                archive.writestr(f"{self.path}@{self.version}/{name}", content)
        return buffer.getvalue()


_MODULE_FILES: Final[dict[str, str]] = {
    "LICENSE": "BSD-3-Clause\n",
    "README.md": "# module\n\nThis is a readme.\n",
    "go.mod": "module my.mod/module\n",
    "foo/foo.go": "package foo\n\nconst Foo = 42\n",
    "bar/bar.go": "package bar\n\nconst Bar = 21\n",
}

DEFAULT_MODULES: Final[tuple[FakeModuleVersion, ...]] = (
    FakeModuleVersion(
        path="my.mod/module",
        version="v1.0.0",
        time=datetime(2019, 1, 30, tzinfo=timezone.utc),
        files=_MODULE_FILES,
    ),
    FakeModuleVersion(
        path="my.mod/module",
        version="v1.1.0",
        time=datetime(2019, 2, 6, 12, 30, tzinfo=timezone.utc),
        files={**_MODULE_FILES, "baz/baz.go": "package baz\n"},
    ),
    FakeModuleVersion(
        path="github.com/Azure/go-autorest",
        version="v11.0.0+incompatible",
        time=datetime(2018, 10, 4, 18, 0, 5, tzinfo=timezone.utc),
        files={"LICENSE": "Apache-2.0\n", "autorest/autorest.go": "package autorest\n"},
    ),
)


@dataclass(slots=True)
class FakeResponse:
    """Raw response registered for a single URL path."""

    status: int = 200
    body: bytes = b""
    content_type: str = "application/octet-stream"
    delay_sec: float | None = None
    drip_interval: float | None = None


class _ThreadedHTTPServer(http.server.ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, server_address: tuple[str, int], proxy: "FakeProxyServer") -> None:
        super().__init__(server_address, _RequestHandler)
        self.proxy: FakeProxyServer = proxy


class _RequestHandler(http.server.BaseHTTPRequestHandler):
    server_version = "FakeModuleProxy/1.0"

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        return

    def do_GET(self) -> None:  # noqa: N802
        proxy = self.server.proxy  # type: ignore[attr-defined]
        path = unquote(urlsplit(self.path).path)
        proxy._record(path)
        response = proxy._lookup(path)
        if response is None:
            self.send_error(404)
            return
        if response.delay_sec:
            time.sleep(response.delay_sec)
        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        self.send_header("Content-Length", str(len(response.body)))
        self.end_headers()
        if not response.drip_interval:
            self.wfile.write(response.body)
            return
        # One byte at a time; stop once the client hangs up.
        for index in range(len(response.body)):
            try:
                self.wfile.write(response.body[index : index + 1])
                self.wfile.flush()
            except (BrokenPipeError, ConnectionResetError):
                return
            time.sleep(response.drip_interval)


class FakeProxyServer(contextlib.AbstractContextManager["FakeProxyServer"]):
    """Threaded HTTP server implementing the read side of the proxy protocol."""

    def __init__(
        self,
        modules: Iterable[FakeModuleVersion] = DEFAULT_MODULES,
        *,
        host: str = "127.0.0.1",
    ) -> None:
        self._host: str = host
        self._routes: dict[str, FakeResponse] = {}
        self._lock: threading.Lock = threading.Lock()
        self._requests: list[str] = []
        self._server: _ThreadedHTTPServer | None = None
        self._thread: threading.Thread | None = None
        for module in modules:
            self.add_module(module)

    def add_module(self, module: FakeModuleVersion) -> None:
        """Serve ``module`` under its escaped ``.info`` and ``.zip`` paths."""

        encoded_path, encoded_version = encode_module_path_and_version(module.path, module.version)
        self.add_route(
            build_url("", encoded_path, encoded_version, ResourceKind.INFO),
            FakeResponse(body=module.info_payload(), content_type="application/json"),
        )
        self.add_route(
            build_url("", encoded_path, encoded_version, ResourceKind.ZIP),
            FakeResponse(body=module.zip_bytes(), content_type="application/zip"),
        )

    def add_route(self, path: str, response: FakeResponse) -> None:
        """Serve ``response`` for the URL path ``path``."""

        with self._lock:
            self._routes["/" + path.lstrip("/")] = response

    @property
    def url(self) -> str:
        """Base URL of the running server, without a trailing slash."""

        if self._server is None:
            raise RuntimeError("FakeProxyServer must be started before requesting its URL")
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def requests(self) -> list[str]:
        """URL paths requested so far, in arrival order."""

        with self._lock:
            return list(self._requests)

    def start(self) -> "FakeProxyServer":
        server = _ThreadedHTTPServer((self._host, 0), self)
        thread = threading.Thread(target=server.serve_forever, name="FakeModuleProxy", daemon=True)
        thread.start()
        self._server = server
        self._thread = thread
        return self

    def stop(self) -> None:
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def __enter__(self) -> "FakeProxyServer":
        return self.start()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

    def _record(self, path: str) -> None:
        with self._lock:
            self._requests.append(path)

    def _lookup(self, path: str) -> FakeResponse | None:
        with self._lock:
            return self._routes.get(path)


__all__ = [
    "DEFAULT_MODULES",
    "FakeModuleVersion",
    "FakeProxyServer",
    "FakeResponse",
]
