"""
CLI Commands.

Organized by backend.
"""

from kivi.cli.commands.consul import app as consul_app
from kivi.cli.commands.etcd import app as etcd_app
from kivi.cli.commands.system import app as system_app

__all__ = [
    "consul_app",
    "etcd_app",
    "system_app",
]
