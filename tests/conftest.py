"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test runs with a clean environment: backend variables and
KIVI_CONFIG_DIR are removed, configuration caches are cleared, and logging
is configured without console output so stdout stays free for assertions.

HTTP traffic never leaves the process. Adapters accept an httpx transport;
the `kv_transport` fixture provides a RecordingTransport that answers from
registered routes and keeps every request it received.
"""

from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest

from kivi.core import logging as logging_module
from kivi.core.config import get_app_config, get_settings
from kivi.core.logging import setup_logging

ENV_VARS = (
    "KIVI_CONFIG_DIR",
    "CONSUL_HTTP_TOKEN",
    "CONSUL_HTTP_ADDR",
    "ETCD_CREDENTIALS",
    "ETCD_ADDR",
)


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================


def _reset_caches() -> None:
    get_settings.cache_clear()
    get_app_config.cache_clear()
    logging_module._logging_config = None


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove kivi-related environment variables and reset config caches."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    _reset_caches()
    yield
    _reset_caches()


@pytest.fixture(autouse=True)
def quiet_logging(
    clean_environment: None, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Configure logging with no console or file handlers."""
    setup_logging(level="WARNING", enable_console=False, enable_file_logging=False)
    yield
    monkeypatch.delenv("KIVI_CONFIG_DIR", raising=False)
    logging_module._logging_config = None
    setup_logging(level="WARNING", enable_console=False, enable_file_logging=False)


# =============================================================================
# HTTP Fixtures
# =============================================================================


class RecordingTransport(httpx.MockTransport):
    """
    Mock transport answering from routes keyed by (method, path).

    Unknown routes answer 404, which is what Consul returns for a missing key.

    Usage:
        kv_transport.add("GET", "/v1/kv/app/db", json=[{"Key": "app/db", "Value": "aGk="}])
        kv_transport.fail("GET", "/v1/kv/app/db", httpx.ConnectError("refused"))
        kv_transport.requests[0].headers["X-CONSUL-TOKEN"]
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        super().__init__(self._handle)

    def add(self, method: str, path: str, status_code: int = 200, **kwargs: Any) -> None:
        """Register a response. kwargs are passed to httpx.Response (json, content, ...)."""
        self._routes[(method, path)] = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, method: str, path: str, error: Exception) -> None:
        """Register a transport-level failure."""

        def raise_error(request: httpx.Request) -> httpx.Response:
            raise error

        self._routes[(method, path)] = raise_error

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self._routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404)
        return route(request)


@pytest.fixture
def kv_transport() -> RecordingTransport:
    """Provide a fresh RecordingTransport."""
    return RecordingTransport()


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def data_file(tmp_path: Any) -> Callable[[str], str]:
    """
    Factory writing content to a temporary file and returning its path.

    Usage:
        path = data_file('{"debug": true}')
    """

    def write(content: str) -> str:
        path = tmp_path / "value.txt"
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write
