"""Run kivi with ``python -m kivi``."""

from kivi.cli.main import app

app(prog_name="kivi")
