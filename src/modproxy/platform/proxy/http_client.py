"""Where: src/modproxy/platform/proxy/http_client.py
What: Blocking HTTP GET adapter and status classification for proxy requests.
Why: Decouple network concerns from metadata decoding and archive parsing.
"""

from __future__ import annotations

import socket
import threading
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import AbstractContextManager, contextmanager, nullcontext, suppress
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Final, Protocol

import requests

from modproxy.platform.logging import logger

from .errors import ProxyError, TransportError

DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0
_CHUNK_SIZE: Final[int] = 64 * 1024


@dataclass(slots=True)
class HTTPResponse:
    """Represent a streamed HTTP response relevant to the proxy client."""

    url: str
    status: int
    reason: str
    chunks: Iterator[bytes]
    closer: Callable[[], None] = field(default=lambda: None, repr=False)
    aborter: Callable[[], None] | None = field(default=None, repr=False)

    @property
    def status_line(self) -> str:
        """``"404 Not Found"`` style text, matching Go's ``Response.Status``."""

        return f"{self.status} {self.reason}".strip()

    def close(self) -> None:
        self.closer()

    def abort(self) -> None:
        """Unblock a read in progress on another thread, then close."""

        if self.aborter is None:
            self.closer()
        else:
            self.aborter()


class HTTPTransport(Protocol):
    """Protocol for HTTP clients able to issue a single streamed GET."""

    def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        timeout: float | None,
    ) -> HTTPResponse:
        """Send the request; raise ``TransportError`` when no response arrives."""

        ...


class Deadline:
    """Per-call deadline and cancellation token.

    ``seconds=None`` never expires on its own but can still be cancelled.
    Callbacks registered with ``watch`` run once the deadline fires or the
    token is cancelled, from whichever thread triggers it.
    """

    def __init__(
        self,
        seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock: Callable[[], float] = clock
        self._expires_at: float | None = None if seconds is None else clock() + seconds
        self._cancelled: threading.Event = threading.Event()
        self._fired: threading.Event = threading.Event()
        self._lock: threading.Lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []

    def cancel(self) -> None:
        self._cancelled.set()
        self._notify()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        if self._fired.is_set():
            return True
        return self._expires_at is not None and self._clock() >= self._expires_at

    def remaining(self) -> float | None:
        """Seconds left before expiry, or ``None`` without a time limit."""

        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def timeout_for(self, default: float | None) -> float | None:
        """Clamp a socket timeout to the time left on this deadline."""

        remaining = self.remaining()
        if remaining is None:
            return default
        if default is None:
            return remaining
        return min(default, remaining)

    def check(self, url: str) -> None:
        """Raise ``TransportError`` once the deadline fired or was cancelled."""

        if self.cancelled:
            raise TransportError(url, "request cancelled")
        if self.expired:
            raise TransportError(url, "deadline exceeded")

    @contextmanager
    def watch(self, on_fire: Callable[[], None]) -> Iterator[None]:
        """Call ``on_fire`` if the deadline fires or is cancelled inside the block.

        A timer thread is armed for the time remaining and disarmed on exit.
        """

        with self._lock:
            self._callbacks.append(on_fire)
        if self.cancelled or self.expired:
            on_fire()

        timer: threading.Timer | None = None
        remaining = self.remaining()
        if remaining is not None:
            timer = threading.Timer(remaining, self._expire)
            timer.daemon = True
            timer.start()
        try:
            yield
        finally:
            if timer is not None:
                timer.cancel()
            with self._lock:
                self._callbacks.remove(on_fire)

    def _expire(self) -> None:
        self._fired.set()
        self._notify()

    def _notify(self) -> None:
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()


class RequestsTransport:
    """Perform GET requests through ``requests`` without retries."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        chunk_size: int = _CHUNK_SIZE,
    ) -> None:
        self._session: requests.Session | None = session
        self._chunk_size: int = chunk_size

    def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        timeout: float | None,
    ) -> HTTPResponse:
        requester = self._session if self._session is not None else requests
        try:
            response = requester.get(url, headers=dict(headers), timeout=timeout, stream=True)
        except requests.Timeout as exc:
            raise TransportError(url, f"timeout: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportError(url, str(exc)) from exc

        return HTTPResponse(
            url=url,
            status=int(response.status_code),
            reason=str(response.reason or ""),
            chunks=_iter_chunks(response, url, self._chunk_size),
            closer=response.close,
            aborter=lambda: _abort(response),
        )


def _abort(response: requests.Response) -> None:
    # Closing alone does not wake a recv blocked on another thread.
    connection = getattr(response.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is not None:
        with suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)
    response.close()


def _iter_chunks(response: requests.Response, url: str, chunk_size: int) -> Iterator[bytes]:
    try:
        yield from response.iter_content(chunk_size=chunk_size)
    # ValueError: the stream was closed under the reader by an abort.
    except (requests.RequestException, OSError, ValueError) as exc:
        raise TransportError(url, f"reading body: {exc}") from exc


@contextmanager
def open_resource(
    url: str,
    *,
    transport: HTTPTransport,
    headers: Mapping[str, str],
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
    deadline: Deadline | None = None,
) -> Iterator[HTTPResponse]:
    """Issue one GET for ``url`` and yield the response when it is 200 OK.

    The response is closed when the block exits, whatever the outcome.
    While the block runs, an expiring or cancelled ``deadline`` aborts the
    response so a blocked body read returns promptly.

    Raises:
        TransportError: The request failed or the deadline fired.
        ProxyError: The proxy answered with any other status.
    """

    if deadline is not None:
        deadline.check(url)
        timeout = deadline.timeout_for(timeout)

    started = time.monotonic()
    logger.debug(
        "GET %s",
        url,
        extra={"proxy_event": "proxy.request.start", "url": url},
    )
    response = transport.get(url, headers=headers, timeout=timeout)
    watcher: AbstractContextManager[None] = (
        deadline.watch(response.abort) if deadline is not None else nullcontext()
    )
    try:
        logger.debug(
            "GET %s -> %s",
            url,
            response.status_line,
            extra={
                "proxy_event": "proxy.request.complete",
                "url": url,
                "status": response.status,
                "duration_ms": (time.monotonic() - started) * 1000.0,
            },
        )
        if response.status != HTTPStatus.OK:
            raise ProxyError.from_status(url, response.status, response.status_line)
        with watcher:
            yield response
    finally:
        response.close()


def read_body(response: HTTPResponse, *, deadline: Deadline | None = None) -> bytes:
    """Buffer the whole body, re-checking ``deadline`` between chunks.

    A read failure caused by the deadline aborting the response is reported
    as the deadline error, as is a body cut short by the abort.
    """

    buffer = bytearray()
    try:
        for chunk in response.chunks:
            if deadline is not None:
                deadline.check(response.url)
            buffer.extend(chunk)
    except TransportError:
        if deadline is not None:
            deadline.check(response.url)
        raise
    if deadline is not None:
        deadline.check(response.url)
    return bytes(buffer)


DEFAULT_TRANSPORT: Final[HTTPTransport] = RequestsTransport()


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_TRANSPORT",
    "Deadline",
    "HTTPResponse",
    "HTTPTransport",
    "RequestsTransport",
    "open_resource",
    "read_body",
]
