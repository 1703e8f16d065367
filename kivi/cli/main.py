"""
kivi CLI entry point.

Usage:
    kivi --help

    # Consul
    kivi consul list app/                     # List children of app/
    kivi consul read app/db                   # Print decoded value
    kivi consul read --encoded app/db         # Print raw base64 value
    kivi consul write --data db.json app/db   # Write file content
    kivi consul write --inline app/db         # Edit current value in $EDITOR

    # etcd (v3 JSON gateway)
    kivi etcd --creds dXNlcjpwYXNz read /app/db

    # System info
    kivi system config                        # Effective configuration
    kivi system version

Options:
    --log-level, -l   Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    --debug           Shorthand for --log-level DEBUG
    --help            Show help message
"""

from typing import Optional

import typer
from kivi.cli.commands import consul_app, etcd_app, system_app
from kivi.core.logging import setup_logging

app = typer.Typer(
    name="kivi",
    help="kivi - read, write, and list keys in Consul or etcd.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(consul_app, name="consul")
app.add_typer(etcd_app, name="etcd")
app.add_typer(system_app, name="system")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Set application log level (defaults to logging.yaml)",
        show_default=False,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    kivi - key-value store client.

    Reads, writes, and lists keys in Consul or etcd over HTTP.
    Log output goes to stderr; stdout carries values only.
    """
    try:
        setup_logging(level="DEBUG" if debug else log_level)
    except (ValueError, FileNotFoundError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
