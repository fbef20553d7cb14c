"""Module proxy client package.

This package implements the read side of the module proxy protocol:
escaping of module identities, the ``@v`` URL layout, blocking HTTP
transport and decoding of ``.info`` metadata and ``.zip`` archives.
"""

from .archive import ArchiveEntry, ArchiveHandle, open_archive
from .client import ProxyClient
from .endpoints import ResourceKind, build_url, clean_url
from .errors import (
    CorruptArchiveError,
    DecodeError,
    InfoDecodeError,
    InvalidInputError,
    NotFoundError,
    ProxyClientError,
    ProxyError,
    TransportError,
)
from .escaping import (
    decode_module_path_and_version,
    encode_module_path_and_version,
    escape_path,
    escape_version,
    unescape_path,
    unescape_version,
)
from .http_client import Deadline, HTTPResponse, HTTPTransport, RequestsTransport
from .models import ModuleIdentity, VersionInfo

__all__ = [
    "ArchiveEntry",
    "ArchiveHandle",
    "CorruptArchiveError",
    "Deadline",
    "DecodeError",
    "HTTPResponse",
    "HTTPTransport",
    "InfoDecodeError",
    "InvalidInputError",
    "ModuleIdentity",
    "NotFoundError",
    "ProxyClient",
    "ProxyClientError",
    "ProxyError",
    "RequestsTransport",
    "ResourceKind",
    "TransportError",
    "VersionInfo",
    "build_url",
    "clean_url",
    "decode_module_path_and_version",
    "encode_module_path_and_version",
    "escape_path",
    "escape_version",
    "open_archive",
    "unescape_path",
    "unescape_version",
]
