"""
System Commands.

Commands for version and effective configuration.
"""

import typer
from rich.console import Console
from rich.table import Table

from kivi import __version__
from kivi.cli.commands.common import load_configuration
from kivi.core.config import find_config_dir, resolve_option

app = typer.Typer(help="System information commands")
console = Console()


def _mask(secret: str | None) -> str:
    return "[green]set[/green]" if secret else "[dim]not set[/dim]"


@app.command()
def config() -> None:
    """
    Display effective configuration.

    Shows the settings directory, backend addresses, timeouts and
    logging level after environment overrides. Secrets are masked.
    """
    app_config, settings = load_configuration()
    application = app_config.application

    table = Table(title="Effective Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Settings directory", str(find_config_dir()))
    table.add_row(
        "Consul address",
        resolve_option(None, settings.consul_http_addr, application.backends.consul.url),
    )
    table.add_row("Consul token", _mask(settings.consul_http_token))
    table.add_row(
        "etcd address",
        resolve_option(None, settings.etcd_addr, application.backends.etcd.url),
    )
    table.add_row("etcd credentials", _mask(settings.etcd_credentials))
    table.add_row("Connect timeout", f"{application.timeouts.connect}s")
    table.add_row("Read timeout", f"{application.timeouts.read}s")
    table.add_row("Log level", app_config.logging.level)

    console.print(table)


@app.command()
def version() -> None:
    """
    Display version information.
    """
    console.print(f"kivi {__version__}")
