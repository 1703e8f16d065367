"""
Shared Key-Value Commands.

Every backend exposes the same list/read/write subcommands. A backend module
only supplies a function turning the parsed command into its configuration
variant; register_kv_commands attaches the subcommands to its Typer app.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

import typer
from kivi.cli.dispatch import EXIT_OK, execute
from kivi.core.config import AppConfig, Settings, get_app_config, get_settings
from kivi.kv.commands import (
    BackendConfig,
    KVCommand,
    ListCommand,
    ReadCommand,
    Timeouts,
    WriteCommand,
)

BuildConfig = Callable[[typer.Context, KVCommand], BackendConfig]


@dataclass(frozen=True)
class BackendOptions:
    """Connection flags given on the backend group, before resolution."""

    url: str | None = None
    credential: str | None = field(default=None, repr=False)


def load_configuration() -> tuple[AppConfig, Settings]:
    """Load YAML settings and environment, exiting with a message on failure."""
    try:
        return get_app_config(), get_settings()
    except (ValueError, FileNotFoundError) as e:
        typer.secho(f"Error loading configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


def timeouts_from(app_config: AppConfig) -> Timeouts:
    timeouts = app_config.application.timeouts
    return Timeouts(connect=timeouts.connect, read=timeouts.read)


def run(config: BackendConfig) -> None:
    """Dispatch a configuration and propagate its exit code."""
    code = execute(config)
    if code != EXIT_OK:
        raise typer.Exit(code)


def register_kv_commands(app: typer.Typer, build_config: BuildConfig) -> None:
    """Attach list, read and write subcommands to a backend app."""

    @app.command("list")
    def list_keys(
        ctx: typer.Context,
        prefix: str = typer.Argument("", help="Target prefix"),
    ) -> None:
        """
        List all prefix child nodes.

        Prints one child per line, relative to the prefix. Nested
        children end with '/'.
        """
        run(build_config(ctx, ListCommand(prefix=prefix)))

    @app.command()
    def read(
        ctx: typer.Context,
        path: str = typer.Argument(..., help="Value path"),
        encoded: bool = typer.Option(False, "--encoded", "-e", help="Print the value as a base64 string"),
    ) -> None:
        """
        Read value under storage path.

        Prints the value exactly as stored, without a trailing newline.
        """
        run(build_config(ctx, ReadCommand(path=path, encoded=encoded)))

    @app.command()
    def write(
        ctx: typer.Context,
        path: str = typer.Argument(..., help="Value path"),
        inline: bool = typer.Option(
            False,
            "--inline",
            "-i",
            help="Read and modify the existing remote value in $EDITOR",
        ),
        data_file: Optional[str] = typer.Option(
            None,
            "--data",
            "-d",
            help="File whose content is written. Ignored with --inline",
        ),
    ) -> None:
        """
        Write value under storage path.

        Either edits the current value in place (--inline) or writes
        the content of a local file (--data).
        """
        if not inline and data_file is None:
            raise typer.BadParameter(
                "nothing to write, pass --inline or --data",
                param_hint="'--inline' / '--data'",
            )
        run(build_config(ctx, WriteCommand(path=path, inline=inline, data_file=data_file)))
