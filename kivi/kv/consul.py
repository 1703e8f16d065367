"""
Consul Remote Source.

Adapter for the Consul KV HTTP API (/v1/kv/). Consul answers reads and
listings with JSON arrays; reads carry PascalCase records whose Value field
is base64 encoded.

    GET  <url>/v1/kv/<prefix>?keys=true&separator=/   list first-level keys
    GET  <url>/v1/kv/<path>                           read one record
    PUT  <url>/v1/kv/<path>                           write raw bytes
"""

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_pascal

from kivi.core.exceptions import NotFoundError, ValueFormatError
from kivi.core.logging import get_logger, log_with_source
from kivi.core.utils import build_url, identity, safe_b64decode, strip_key_prefix
from kivi.http.auth import TokenAuthHeader
from kivi.http.client import KVHttpClient
from kivi.kv.base import KVDisplayConfig, KVRemoteSource, KVValue
from kivi.kv.commands import ConsulConfig

logger = get_logger(__name__)

KV_API_PATH = "/v1/kv/"
FIRST_LEVEL_KEYS_PARAMS = "?keys=true&separator=/"
TOKEN_HEADER = "X-CONSUL-TOKEN"


class ConsulValue(BaseModel):
    """A stored Consul record as returned by the KV API."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")

    key: str
    value: str | None = None
    flags: int = 0
    lock_index: int = 0
    create_index: int = 0
    modify_index: int = 0

    def to_kv_value(self, display: KVDisplayConfig) -> KVValue:
        """Convert to KVValue, decoding the payload unless raw base64 is wanted."""
        extract = identity if display.as_b64_encoded else safe_b64decode
        value = "" if self.value is None else extract(self.value)
        return KVValue(path=self.key, value=value)


_RECORDS = TypeAdapter(list[ConsulValue])
_KEYS = TypeAdapter(list[str])


def _decode(adapter: TypeAdapter, response: httpx.Response) -> list:
    try:
        return adapter.validate_json(response.content)
    except ValidationError as e:
        log_with_source(
            logger, "consul", "debug", "Unexpected response body",
            url=str(response.request.url), errors=e.error_count(),
        )
        raise ValueFormatError() from e


class ConsulRemote(KVRemoteSource):
    """
    Consul KV source.

    Usage:
        config = ConsulConfig(url="http://127.0.0.1:8500", command=ReadCommand("app/db"))
        with ConsulRemote(config) as consul:
            consul.read("app/db")
    """

    def __init__(self, config: ConsulConfig, transport: httpx.BaseTransport | None = None) -> None:
        super().__init__(
            KVHttpClient(
                timeouts=config.timeouts,
                auth=TokenAuthHeader(TOKEN_HEADER, config.token),
                transport=transport,
                source="consul",
            )
        )
        self.config = config

    @property
    def backend_name(self) -> str:
        return "consul"

    def _url(self, suffix: str) -> str:
        """
        Build a Consul KV URL for a key path.

        Example:
            self._url("/some/value")  # "http://127.0.0.1:8500/v1/kv/some/value"
        """
        return build_url(self.config.url, KV_API_PATH, suffix)

    def list_keys(self, prefix: str) -> list[str]:
        """
        List keys directly under prefix.

        Consul returns full key paths including the queried prefix and the
        prefix node itself; both are reduced to child names.

        Raises:
            ValueFormatError: If the body is not a JSON array of strings
        """
        log_with_source(logger, "consul", "debug", "Listing keys", prefix=prefix)
        response = self.http.get(self._url(prefix) + FIRST_LEVEL_KEYS_PARAMS)
        keys = _decode(_KEYS, response)
        return strip_key_prefix(prefix)(keys)

    def read(self, path: str, display: KVDisplayConfig = KVDisplayConfig()) -> KVValue:
        """
        Read the record stored under path.

        Raises:
            NotFoundError: On 404 or an empty array
            ValueFormatError: If the body is not an array of Consul records
        """
        log_with_source(logger, "consul", "debug", "Reading key", path=path)
        response = self.http.get(self._url(path))
        records = _decode(_RECORDS, response)
        if not records:
            raise NotFoundError()
        return records[0].to_kv_value(display)

    def put(self, path: str, content: str) -> None:
        """Store content under path as the raw request body."""
        log_with_source(logger, "consul", "debug", "Writing key", path=path, size=len(content))
        self.http.put(self._url(path), content=content.encode("utf-8"))
