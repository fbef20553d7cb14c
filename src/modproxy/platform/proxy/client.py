"""Where: src/modproxy/platform/proxy/client.py
What: Facade resolving module versions into proxy metadata and archives.
Why: Delegate escaping, URL layout and transport to focused collaborators
     while exposing a small public API to callers such as the CLI.

The facade wires together:
- ``escaping`` for the case-escaping of module paths and versions
- ``endpoints`` for the ``{module}/@v/{version}.{info,zip}`` layout
- ``http_client`` for blocking GETs and status classification
- ``archive`` for in-memory zip access

The exposed API is ``ProxyClient.get_info`` and ``ProxyClient.get_zip``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, final

from .archive import ArchiveHandle, open_archive
from .endpoints import ResourceKind, build_url, clean_url
from .errors import InfoDecodeError
from .http_client import (
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TRANSPORT,
    Deadline,
    HTTPTransport,
    open_resource,
    read_body,
)
from .models import ModuleIdentity, VersionInfo
from .user_agent import default_user_agent

if TYPE_CHECKING:
    from modproxy.config.config import Config


@final
class ProxyClient:
    """Read-only client for a module proxy.

    Instances hold only immutable configuration, so one client may serve
    concurrent callers; every call builds its own identity and buffers.
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: HTTPTransport | None = None,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str | None = None,
    ) -> None:
        self._base_url: str = clean_url(base_url)
        self._transport: HTTPTransport = transport if transport is not None else DEFAULT_TRANSPORT
        self._timeout: float | None = timeout
        self._headers: dict[str, str] = {"User-Agent": user_agent or default_user_agent()}

    @classmethod
    def from_config(
        cls,
        config: "Config",
        *,
        transport: HTTPTransport | None = None,
    ) -> "ProxyClient":
        """Build a client from persisted configuration."""

        from modproxy.config.settings import resolve_timeout, resolve_user_agent

        return cls(
            config.proxy_url,
            transport=transport,
            timeout=resolve_timeout(config),
            user_agent=resolve_user_agent(config),
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float | None:
        return self._timeout

    @property
    def user_agent(self) -> str:
        return self._headers["User-Agent"]

    def identity(self, path: str, version: str) -> ModuleIdentity:
        return ModuleIdentity.from_raw(path, version)

    def info_url(self, path: str, version: str) -> str:
        """URL of the ``.info`` resource for ``path@version``."""

        return self._url_for(self.identity(path, version), ResourceKind.INFO)

    def zip_url(self, path: str, version: str) -> str:
        """URL of the ``.zip`` resource for ``path@version``."""

        return self._url_for(self.identity(path, version), ResourceKind.ZIP)

    def get_info(self, path: str, version: str, *, deadline: Deadline | None = None) -> VersionInfo:
        """Fetch and decode the version metadata of ``path@version``.

        Raises:
            InvalidInputError: ``path`` or ``version`` cannot be escaped.
            TransportError: The request failed, timed out or was cancelled.
            NotFoundError: The proxy does not serve this version.
            ProxyError: The proxy answered with another non-200 status.
            InfoDecodeError: The body is not valid version metadata.
        """

        url = self._url_for(self.identity(path, version), ResourceKind.INFO)
        with open_resource(
            url,
            transport=self._transport,
            headers=self._headers,
            timeout=self._timeout,
            deadline=deadline,
        ) as response:
            body = read_body(response, deadline=deadline)

        try:
            payload: Any = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise InfoDecodeError(url, f"malformed JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise InfoDecodeError(url, "expected a JSON object")

        try:
            return VersionInfo.from_payload(payload)
        except ValueError as exc:
            raise InfoDecodeError(url, str(exc)) from exc

    def get_zip(self, path: str, version: str, *, deadline: Deadline | None = None) -> ArchiveHandle:
        """Fetch the zip archive of ``path@version`` and open it in memory.

        Entries are returned exactly as served. An archive without entries
        is valid.

        Raises:
            InvalidInputError: ``path`` or ``version`` cannot be escaped.
            TransportError: The request failed, timed out or was cancelled.
            NotFoundError: The proxy does not serve this version.
            ProxyError: The proxy answered with another non-200 status.
            CorruptArchiveError: The body is not a readable zip archive.
        """

        url = self._url_for(self.identity(path, version), ResourceKind.ZIP)
        with open_resource(
            url,
            transport=self._transport,
            headers=self._headers,
            timeout=self._timeout,
            deadline=deadline,
        ) as response:
            body = read_body(response, deadline=deadline)

        return open_archive(body, url=url)

    def _url_for(self, identity: ModuleIdentity, kind: ResourceKind) -> str:
        return build_url(self._base_url, identity.encoded_path, identity.encoded_version, kind)

    def __repr__(self) -> str:
        return f"ProxyClient(base_url={self._base_url!r})"


__all__ = ["ProxyClient"]
