"""Shared pytest fixtures for the modproxy test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from modproxy.config.config import Config
from modproxy.platform.proxy import ProxyClient
from modproxy.testing import FakeProxyServer


@pytest.fixture(autouse=True)
def reset_config_cache() -> Iterator[None]:
    """Reset the configuration singleton around every test."""

    Config._instance = None  # pyright: ignore[reportPrivateUsage]
    Config._cache_key = None  # pyright: ignore[reportPrivateUsage]
    yield
    Config._instance = None  # pyright: ignore[reportPrivateUsage]
    Config._cache_key = None  # pyright: ignore[reportPrivateUsage]


@pytest.fixture
def fake_proxy() -> Iterator[FakeProxyServer]:
    """Run a loopback module proxy serving the default module versions."""

    with FakeProxyServer() as server:
        yield server


@pytest.fixture
def proxy_client(fake_proxy: FakeProxyServer) -> ProxyClient:
    """Client bound to ``fake_proxy`` with a short timeout."""

    return ProxyClient(fake_proxy.url, timeout=5.0)
