"""
Command and Backend Configuration Records.

Immutable values built once by the CLI layer and handed to the dispatcher.
A backend configuration is one variant of a tagged union (ConsulConfig,
EtcdConfig); the dispatcher picks the adapter from the variant's type.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass(frozen=True)
class ListCommand:
    """List the first-level children of a prefix."""

    prefix: str = ""


@dataclass(frozen=True)
class ReadCommand:
    """Read the value stored under a path."""

    path: str
    encoded: bool = False


@dataclass(frozen=True)
class WriteCommand:
    """
    Write a value under a path.

    With inline set, the current value is opened in the user's editor and
    the edited text is written back; data_file is then ignored. Otherwise
    the full contents of data_file are written.
    """

    path: str
    inline: bool = False
    data_file: str | None = None


KVCommand = Union[ListCommand, ReadCommand, WriteCommand]


@dataclass(frozen=True)
class Timeouts:
    """HTTP timeouts in seconds."""

    connect: float = 5.0
    read: float = 5.0


@dataclass(frozen=True)
class ConsulConfig:
    """Consul connection settings plus the command to run."""

    backend: ClassVar[str] = "consul"

    url: str
    command: KVCommand
    token: str | None = field(default=None, repr=False)
    timeouts: Timeouts = field(default_factory=Timeouts)


@dataclass(frozen=True)
class EtcdConfig:
    """
    etcd connection settings plus the command to run.

    credentials is a base64 encoded 'user:password' string.
    """

    backend: ClassVar[str] = "etcd"

    url: str
    command: KVCommand
    credentials: str | None = field(default=None, repr=False)
    timeouts: Timeouts = field(default_factory=Timeouts)


BackendConfig = Union[ConsulConfig, EtcdConfig]
