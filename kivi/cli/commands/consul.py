"""
Consul Commands.

    kivi consul [--token T] [--url U] list|read|write ...

Token and address fall back to CONSUL_HTTP_TOKEN and CONSUL_HTTP_ADDR,
then to application.yaml.
"""

from typing import Optional

import typer

from kivi.cli.commands.common import (
    BackendOptions,
    load_configuration,
    register_kv_commands,
    timeouts_from,
)
from kivi.core.config import resolve_option
from kivi.kv.commands import ConsulConfig, KVCommand

app = typer.Typer(help="Connect to Consul server", no_args_is_help=True)


@app.callback()
def consul(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(
        None,
        "--token",
        "-t",
        help="Consul token to supply, leave blank to skip authentication [env: CONSUL_HTTP_TOKEN]",
        show_default=False,
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="Consul address [env: CONSUL_HTTP_ADDR]",
        show_default=False,
    ),
) -> None:
    """
    Connect to Consul server.
    """
    ctx.obj = BackendOptions(url=url, credential=token)


def build_config(ctx: typer.Context, command: KVCommand) -> ConsulConfig:
    """Resolve flags, environment and settings into a ConsulConfig."""
    options: BackendOptions = ctx.obj or BackendOptions()
    app_config, settings = load_configuration()
    return ConsulConfig(
        url=resolve_option(options.url, settings.consul_http_addr, app_config.application.backends.consul.url),
        token=resolve_option(options.credential, settings.consul_http_token, None),
        command=command,
        timeouts=timeouts_from(app_config),
    )


register_kv_commands(app, build_config)
