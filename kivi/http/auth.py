"""
Authentication Request Hook.

Header-based credentials for remote backends. TokenAuthHeader is installed
as an httpx "request" event hook, so it runs on every outgoing request just
before it is sent. Backend agnostic:

    Consul: TokenAuthHeader("X-CONSUL-TOKEN", token)
    etcd:   TokenAuthHeader("Authorization", basic_auth(credentials))

The credential is never logged or included in repr().
"""

import httpx


def basic_auth(credentials: str) -> str:
    """Format a Basic auth header value from base64 encoded 'user:password'."""
    return f"Basic {credentials}"


class TokenAuthHeader:
    """Sets one header to a credential when the credential exists."""

    def __init__(self, header: str, token: str | None) -> None:
        self.header = header
        self._token = token

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def __call__(self, request: httpx.Request) -> None:
        """Add the header; leave the request untouched without a credential."""
        if self._token is not None:
            request.headers[self.header] = self._token

    def __repr__(self) -> str:
        state = "set" if self.has_token else "unset"
        return f"TokenAuthHeader(header={self.header!r}, token=<{state}>)"
