"""
HTTP Client for Remote Backends.

Synchronous httpx client shared by every backend adapter for the duration of
one command. Applies fixed connect/read timeouts, runs the auth hook before
each request, logs requests and responses at debug level, and translates
every failure into a KVError via error_for_status.
"""

from collections.abc import Callable
from typing import Any

import httpx

from kivi.core.exceptions import (
    AuthenticationError,
    KVError,
    NotFoundError,
    PermissionDeniedError,
    RemoteUnavailableError,
)
from kivi.core.logging import get_logger, log_with_source
from kivi.kv.commands import Timeouts

logger = get_logger(__name__)

RequestHook = Callable[[httpx.Request], None]

_STATUS_ERRORS: dict[int, type[KVError]] = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
}


def error_for_status(status_code: int | None) -> KVError:
    """
    Map an HTTP outcome to a KVError.

    Args:
        status_code: Non-2xx response status, or None for a transport-level
            failure (connect, timeout, DNS, protocol)

    Returns:
        The KVError for that outcome. Unlisted statuses and transport
        failures are RemoteUnavailableError.
    """
    if status_code is None:
        return RemoteUnavailableError()
    return _STATUS_ERRORS.get(status_code, RemoteUnavailableError)()


class KVHttpClient:
    """
    HTTP client for remote key-value backends.

    Features:
    - Fixed connect/read timeouts
    - Optional auth hook run before every request
    - Structured logging of requests/responses (never headers)
    - Non-2xx responses and transport failures raised as KVError

    Usage:
        client = KVHttpClient(Timeouts(), auth=TokenAuthHeader("X-CONSUL-TOKEN", token))
        response = client.get("http://127.0.0.1:8500/v1/kv/app/db")
    """

    def __init__(
        self,
        timeouts: Timeouts | None = None,
        auth: RequestHook | None = None,
        transport: httpx.BaseTransport | None = None,
        source: str = "http",
    ) -> None:
        """
        Initialize the client.

        Args:
            timeouts: Connect/read timeouts. Defaults to 5 seconds each.
            auth: Request hook adding credentials, see kivi.http.auth
            transport: Custom httpx transport (tests use httpx.MockTransport)
            source: Log source recorded on every request log line
        """
        self.timeouts = timeouts or Timeouts()
        self.source = source
        request_hooks: list[RequestHook] = [auth] if auth is not None else []
        self._client = httpx.Client(
            timeout=httpx.Timeout(self.timeouts.read, connect=self.timeouts.connect),
            event_hooks={"request": request_hooks},
            transport=transport,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        """Close the HTTP client."""
        if not self._client.is_closed:
            self._client.close()

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Send an HTTP request.

        Args:
            method: HTTP method (GET, PUT, POST)
            url: Absolute URL
            **kwargs: Additional arguments for httpx

        Returns:
            The 2xx httpx.Response

        Raises:
            KVError: On transport failure or non-2xx status
        """
        log_with_source(logger, self.source, "debug", "HTTP request", method=method, url=url)

        try:
            response = self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log_with_source(
                logger,
                self.source,
                "debug",
                "HTTP request failed",
                method=method,
                url=url,
                error=str(e),
            )
            raise error_for_status(None) from e

        log_with_source(
            logger,
            self.source,
            "debug",
            "HTTP response",
            method=method,
            url=url,
            status_code=response.status_code,
        )

        if not response.is_success:
            raise error_for_status(response.status_code)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return self.request("GET", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a PUT request."""
        return self.request("PUT", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return self.request("POST", url, **kwargs)
