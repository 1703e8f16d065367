"""
etcd Remote Source.

Adapter for the etcd v3 JSON gateway. Keys and values travel base64 encoded
inside JSON request and response bodies; every call is a POST.

    POST <url>/v3/kv/range   read one key, or list a key range
    POST <url>/v3/kv/put     write one key

etcd has no directory semantics, so listing fetches every key under the
prefix and keeps first-level children only, the same shape Consul returns
for ?separator=/.
"""

import base64
import binascii

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from kivi.core.exceptions import NotFoundError, ValueFormatError
from kivi.core.logging import get_logger, log_with_source
from kivi.core.utils import (
    PATH_DELIMITER,
    build_url,
    identity,
    safe_b64decode,
    strip_key_prefix,
)
from kivi.http.auth import TokenAuthHeader, basic_auth
from kivi.http.client import KVHttpClient
from kivi.kv.base import KVDisplayConfig, KVRemoteSource, KVValue
from kivi.kv.commands import EtcdConfig

logger = get_logger(__name__)

KV_API_PATH = "/v3/kv/"
AUTH_HEADER = "Authorization"


class EtcdKeyValue(BaseModel):
    """One entry of a range response. Absent fields are omitted by the gateway."""

    model_config = ConfigDict(extra="ignore")

    key: str
    value: str | None = None


class EtcdRangeResponse(BaseModel):
    """Body of /v3/kv/range. 'kvs' is omitted when nothing matched."""

    model_config = ConfigDict(extra="ignore")

    kvs: list[EtcdKeyValue] = []


def encode_key(key: str) -> str:
    """Encode text as standard base64, the gateway's wire form for bytes."""
    return base64.b64encode(key.encode("utf-8")).decode("ascii")


def prefix_range_end(prefix: str) -> str:
    """
    Return the base64 encoded range_end covering every key with prefix.

    The end is the prefix with its last byte incremented. An empty prefix
    means "to the end of the keyspace", which etcd spells as a single zero
    byte. UTF-8 text never ends in 0xff, so the increment cannot overflow.
    """
    end = bytearray(prefix.encode("utf-8"))
    if not end:
        return base64.b64encode(b"\x00").decode("ascii")
    end[-1] += 1
    return base64.b64encode(bytes(end)).decode("ascii")


def _decode_key(raw: str) -> str:
    try:
        return base64.b64decode(raw, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise ValueFormatError() from e


def first_level_children(keys: list[str]) -> list[str]:
    """
    Collapse relative keys to their first path segment.

    Nested keys keep the trailing delimiter ("b/c" becomes "b/"), duplicates
    are dropped, and the first-seen order is kept.
    """
    children: list[str] = []
    seen: set[str] = set()
    for key in keys:
        head, sep, _ = key.partition(PATH_DELIMITER)
        child = head + sep
        if child and child not in seen:
            seen.add(child)
            children.append(child)
    return children


class EtcdRemote(KVRemoteSource):
    """
    etcd v3 KV source.

    Usage:
        config = EtcdConfig(url="http://127.0.0.1:2379", command=ListCommand("app/"))
        with EtcdRemote(config) as etcd:
            etcd.list_keys("app/")
    """

    def __init__(self, config: EtcdConfig, transport: httpx.BaseTransport | None = None) -> None:
        credentials = basic_auth(config.credentials) if config.credentials is not None else None
        super().__init__(
            KVHttpClient(
                timeouts=config.timeouts,
                auth=TokenAuthHeader(AUTH_HEADER, credentials),
                transport=transport,
                source="etcd",
            )
        )
        self.config = config

    @property
    def backend_name(self) -> str:
        return "etcd"

    def _url(self, endpoint: str) -> str:
        return build_url(self.config.url, KV_API_PATH, endpoint)

    def _range(self, body: dict) -> EtcdRangeResponse:
        response = self.http.post(self._url("range"), json=body)
        try:
            return EtcdRangeResponse.model_validate_json(response.content)
        except ValidationError as e:
            log_with_source(logger, "etcd", "debug", "Unexpected range body", errors=e.error_count())
            raise ValueFormatError() from e

    def list_keys(self, prefix: str) -> list[str]:
        """
        List first-level children of prefix.

        Raises:
            ValueFormatError: If the body or a returned key cannot be decoded
        """
        log_with_source(logger, "etcd", "debug", "Listing keys", prefix=prefix)
        result = self._range({
            "key": encode_key(prefix) if prefix else encode_key("\x00"),
            "range_end": prefix_range_end(prefix),
            "keys_only": True,
        })
        keys = [_decode_key(item.key) for item in result.kvs]
        return first_level_children(strip_key_prefix(prefix)(keys))

    def read(self, path: str, display: KVDisplayConfig = KVDisplayConfig()) -> KVValue:
        """
        Read the value stored under path.

        Raises:
            NotFoundError: If the key does not exist
            ValueFormatError: If the body cannot be decoded
        """
        log_with_source(logger, "etcd", "debug", "Reading key", path=path)
        result = self._range({"key": encode_key(path)})
        if not result.kvs:
            raise NotFoundError()

        item = result.kvs[0]
        extract = identity if display.as_b64_encoded else safe_b64decode
        value = "" if item.value is None else extract(item.value)
        return KVValue(path=_decode_key(item.key), value=value)

    def put(self, path: str, content: str) -> None:
        """Store content under path."""
        log_with_source(logger, "etcd", "debug", "Writing key", path=path, size=len(content))
        self.http.post(
            self._url("put"),
            json={"key": encode_key(path), "value": encode_key(content)},
        )
