"""
Core Utilities.

String and URL helpers shared by every backend adapter.
All modules should import utilities from this module.
"""

import base64
import binascii
from collections.abc import Callable

from kivi.core.logging import get_logger

logger = get_logger(__name__)

PATH_DELIMITER = "/"


def safe_b64decode(value: str) -> str:
    """
    Decode a base64 encoded string into text without raising.

    Empty input decodes to an empty string. Invalid base64 or decoded bytes
    that are not valid UTF-8 also decode to an empty string.

    Args:
        value: Standard-alphabet, padded base64 text

    Returns:
        Decoded UTF-8 text, or "" when decoding fails
    """
    if not value:
        return ""
    try:
        raw = base64.b64decode(value, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, ValueError):
        logger.warning("Discarding value that is not valid base64 UTF-8 text", length=len(value))
        return ""


def identity(value: str) -> str:
    """Return the value unchanged."""
    return value


def make_linter(
    prefix: str | None = None,
    suffix: str | None = None,
    trim: bool = False,
) -> Callable[[str], str]:
    """
    Create a reusable string linter.

    The linter optionally trims surrounding whitespace, then removes one
    literal prefix and one literal suffix when present. A missing prefix or
    suffix leaves the string as is.

    Args:
        prefix: Prefix to remove
        suffix: Suffix to remove
        trim: Strip surrounding whitespace first

    Returns:
        Function applying the configured transformations

    Example:
        linter = make_linter("https://", ":443", trim=True)
        linter("  https://example.com:443  ")  # "example.com"
    """

    def lint(value: str) -> str:
        result = value.strip() if trim else value
        if prefix:
            result = result.removeprefix(prefix)
        if suffix:
            result = result.removesuffix(suffix)
        return result

    return lint


path_linter = make_linter(prefix=PATH_DELIMITER, trim=True)
"""Trims a path fragment and removes one leading '/'."""

_base_url_linter = make_linter(suffix=PATH_DELIMITER, trim=True)


def build_url(base: str, base_path: str, suffix: str) -> str:
    """
    Build a full URL from its parts.

    Args:
        base: <scheme>://<host>[:<port>][/]. Trimmed, one trailing '/' ignored
        base_path: Appended as is, must carry its own leading and trailing '/'
        suffix: Relative path. Trimmed, one leading '/' ignored

    Returns:
        Concatenated URL

    Example:
        build_url("https://example.com/", "/base_path/", "/new-post")
        # "https://example.com/base_path/new-post"

        build_url("https://example.com", "/base_path", "/new-post")
        # "https://example.com/base_pathnew-post" - base_path is not normalized
    """
    return "".join([_base_url_linter(base), base_path, path_linter(suffix)])


def strip_key_prefix(prefix: str) -> Callable[[list[str]], list[str]]:
    """
    Create a function that removes a prefix from every key in a list.

    Keys that become empty (the prefix node itself) are dropped. Used to turn
    full key paths returned by a listing into child names relative to the
    listed prefix.

    Args:
        prefix: Literal prefix to remove, not trimmed

    Returns:
        Function mapping a key list to its de-prefixed, non-empty keys
    """
    key_linter = make_linter(prefix=prefix)

    def strip(keys: list[str]) -> list[str]:
        stripped = (key_linter(key) for key in keys)
        return [key for key in stripped if key]

    return strip
