"""
etcd Commands.

    kivi etcd [--creds C] [--url U] list|read|write ...

Credentials and address fall back to ETCD_CREDENTIALS and ETCD_ADDR,
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
from kivi.kv.commands import EtcdConfig, KVCommand

app = typer.Typer(help="Connect to etcd server", no_args_is_help=True)


@app.callback()
def etcd(
    ctx: typer.Context,
    creds: Optional[str] = typer.Option(
        None,
        "--creds",
        "-c",
        help=(
            "etcd credentials, a base64 encoded 'user:password' string. "
            "Leave blank to skip authentication [env: ETCD_CREDENTIALS]"
        ),
        show_default=False,
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="etcd address [env: ETCD_ADDR]",
        show_default=False,
    ),
) -> None:
    """
    Connect to etcd server (v3 JSON gateway).
    """
    ctx.obj = BackendOptions(url=url, credential=creds)


def build_config(ctx: typer.Context, command: KVCommand) -> EtcdConfig:
    """Resolve flags, environment and settings into an EtcdConfig."""
    options: BackendOptions = ctx.obj or BackendOptions()
    app_config, settings = load_configuration()
    return EtcdConfig(
        url=resolve_option(options.url, settings.etcd_addr, app_config.application.backends.etcd.url),
        credentials=resolve_option(options.credential, settings.etcd_credentials, None),
        command=command,
        timeouts=timeouts_from(app_config),
    )


register_kv_commands(app, build_config)
