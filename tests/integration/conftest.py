"""
Integration Test Fixtures.

The Typer app is driven through CliRunner exactly as a user would invoke it.
Only the network is replaced: every adapter the dispatcher builds talks to
the shared RecordingTransport.
"""

from functools import partial

import pytest
from typer.testing import CliRunner

from kivi.cli import dispatch


@pytest.fixture
def runner() -> CliRunner:
    """Provide a CLI runner."""
    return CliRunner()


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch, kv_transport):
    """
    Route dispatcher-created adapters through the recording transport.

    Usage:
        def test_read(runner, backend):
            backend.add("GET", "/v1/kv/app/db", json=[...])
            result = runner.invoke(app, ["consul", "read", "app/db"])
    """
    monkeypatch.setattr(
        dispatch,
        "create_source",
        partial(dispatch.create_source, transport=kv_transport),
    )
    return kv_transport
