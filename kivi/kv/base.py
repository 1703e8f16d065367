"""
Key-Value Source Interface.

Defines the value model and the contract every remote key-value backend
implements. The dispatcher talks to backends exclusively through
KVRemoteSource; backend wire records never cross this boundary.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

import click

from kivi.core.exceptions import WriteFailureError
from kivi.core.logging import get_logger
from kivi.http.client import KVHttpClient
from kivi.kv.commands import KVCommand, ListCommand, ReadCommand, WriteCommand

logger = get_logger(__name__)

NOTHING_TO_WRITE = "nothing to write: pass --inline or --data"


@dataclass(frozen=True)
class KVValue:
    """A decoded value and the fully qualified key it was read from."""

    path: str
    value: str

    def inline_edit(self) -> str:
        """
        Open the current value in the user's editor and return the result.

        Uses $VISUAL or $EDITOR. Blocks until the editor exits. If the file
        is closed without saving, the current value is returned unchanged.

        The buffer is handed to the editor as bytes so click neither appends
        a newline nor rewrites line endings.

        Raises:
            WriteFailureError: If the editor cannot be launched, fails, or
                leaves text that is not UTF-8
        """
        try:
            edited = click.edit(text=self.value.encode("utf-8"), require_save=True)
            return self.value if edited is None else edited.decode("utf-8")
        except (click.ClickException, OSError, UnicodeDecodeError) as e:
            raise WriteFailureError.wrap(e) from e


@dataclass(frozen=True)
class KVDisplayConfig:
    """How read values are presented: raw base64 text or decoded text."""

    as_b64_encoded: bool = False


class KVRemoteSource(ABC):
    """
    Base class for all remote key-value backends.

    Subclasses translate list/read/put into backend HTTP calls and map the
    backend's JSON into KVValue. Every failure is raised as a KVError.

    Sources own their HTTP client; use them as context managers so the
    client is closed when the command finishes:

        with ConsulRemote(config) as source:
            value = source.read("app/db")
    """

    def __init__(self, http: KVHttpClient) -> None:
        self.http = http

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Unique backend identifier (e.g., 'consul', 'etcd')."""
        ...

    @abstractmethod
    def list_keys(self, prefix: str) -> list[str]:
        """Return the first-level children of prefix, relative to it."""
        ...

    @abstractmethod
    def read(self, path: str, display: KVDisplayConfig = KVDisplayConfig()) -> KVValue:
        """Return the value stored under path."""
        ...

    @abstractmethod
    def put(self, path: str, content: str) -> None:
        """Store content under path, replacing any existing value."""
        ...

    def write(self, command: WriteCommand) -> None:
        """
        Write a value in inline-edit or file mode.

        Inline mode reads the current decoded value, opens it in the editor
        and writes the result. File mode writes the file contents verbatim.
        Failure while producing the content stops before any request is sent.

        Raises:
            KVError: From the read, the editor, the file, or the put
        """
        content = self._resolve_content(command)
        self.put(command.path, content)

    def _resolve_content(self, command: WriteCommand) -> str:
        if command.inline:
            current = self.read(command.path, KVDisplayConfig(as_b64_encoded=False))
            return current.inline_edit()

        if command.data_file is None:
            raise WriteFailureError(NOTHING_TO_WRITE)

        try:
            return Path(command.data_file).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Could not read data file", data_file=command.data_file, error=str(e))
            raise WriteFailureError.wrap(e) from e

    def execute(self, command: KVCommand) -> KVValue | list[str] | None:
        """
        Run one command against this source.

        Returns:
            KVValue for a read, key list for a list, None for a write
        """
        if isinstance(command, ReadCommand):
            return self.read(command.path, KVDisplayConfig(as_b64_encoded=command.encoded))
        if isinstance(command, ListCommand):
            return self.list_keys(command.prefix)
        if isinstance(command, WriteCommand):
            self.write(command)
            return None
        raise TypeError(f"Unsupported command: {type(command).__name__}")

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.http.close()

    def __enter__(self) -> "KVRemoteSource":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
