"""
Command Dispatcher.

Single point where a backend configuration becomes an adapter call and the
result (or error) becomes terminal output and an exit code. Adapters never
print; the dispatcher never lets a KVError escape.
"""

import httpx
import typer

from kivi.core.exceptions import KVError
from kivi.core.logging import get_logger, log_with_source
from kivi.kv.base import KVRemoteSource, KVValue
from kivi.kv.commands import BackendConfig, ConsulConfig, EtcdConfig, KVCommand, ListCommand, ReadCommand
from kivi.kv.consul import ConsulRemote
from kivi.kv.etcd import EtcdRemote

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_KV_ERROR = 1


def create_source(config: BackendConfig, transport: httpx.BaseTransport | None = None) -> KVRemoteSource:
    """Construct the adapter matching the configuration variant."""
    if isinstance(config, ConsulConfig):
        return ConsulRemote(config, transport=transport)
    if isinstance(config, EtcdConfig):
        return EtcdRemote(config, transport=transport)
    raise TypeError(f"Unsupported backend configuration: {type(config).__name__}")


def render_result(command: KVCommand, result: KVValue | list[str] | None) -> None:
    """Print a command result to stdout."""
    if isinstance(command, ReadCommand) and isinstance(result, KVValue):
        typer.echo(result.value, nl=False)
    elif isinstance(command, ListCommand) and result is not None:
        for key in result:
            typer.echo(key)


def render_error(error: KVError) -> None:
    """Print the fixed message for an error as one line on stderr."""
    typer.secho(str(error), fg=typer.colors.RED, err=True)


def execute(config: BackendConfig) -> int:
    """
    Run the configured command and render its outcome.

    Returns:
        EXIT_OK on success, EXIT_KV_ERROR on any KVError
    """
    log_with_source(
        logger,
        "cli",
        "debug",
        "Executing command",
        backend=config.backend,
        command=type(config.command).__name__,
    )

    try:
        with create_source(config) as source:
            result = source.execute(config.command)
    except KVError as e:
        log_with_source(logger, "cli", "debug", "Command failed", kind=e.kind.value)
        render_error(e)
        return EXIT_KV_ERROR

    render_result(config.command, result)
    return EXIT_OK
