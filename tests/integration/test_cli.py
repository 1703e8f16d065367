"""
Integration tests for the kivi CLI.

Runs full command lines through the Typer app, the dispatcher and the
backend adapters, with HTTP answered by a mock transport.
"""

import base64
import json

import httpx
from typer.testing import CliRunner

from kivi.cli.main import app


def b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


class TestConsulCli:
    """Consul commands end to end."""

    def test_read(self, runner: CliRunner, backend) -> None:
        backend.add("GET", "/v1/kv/app/db", json=[{"Key": "app/db", "Value": b64("hello\nworld")}])

        result = runner.invoke(app, ["consul", "read", "app/db"])

        assert result.exit_code == 0
        assert result.stdout == "hello\nworld"
        assert str(backend.requests[0].url) == "http://127.0.0.1:8500/v1/kv/app/db"

    def test_read_encoded(self, runner: CliRunner, backend) -> None:
        backend.add("GET", "/v1/kv/app/db", json=[{"Key": "app/db", "Value": "aGk="}])

        result = runner.invoke(app, ["consul", "read", "--encoded", "app/db"])

        assert result.exit_code == 0
        assert result.stdout == "aGk="

    def test_list(self, runner: CliRunner, backend) -> None:
        backend.add("GET", "/v1/kv/app/", json=["app/db", "app/cache/"])

        result = runner.invoke(app, ["consul", "list", "app/"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["db", "cache/"]
        assert backend.requests[0].url.params["separator"] == "/"

    def test_write_from_file(self, runner: CliRunner, backend, data_file) -> None:
        backend.add("PUT", "/v1/kv/app/db", json=True)
        path = data_file('{"debug": true}')

        result = runner.invoke(app, ["consul", "write", "--data", path, "app/db"])

        assert result.exit_code == 0
        assert result.stdout == ""
        assert backend.requests[0].method == "PUT"
        assert backend.requests[0].content == b'{"debug": true}'

    def test_missing_key(self, runner: CliRunner, backend) -> None:
        result = runner.invoke(app, ["consul", "read", "app/missing"])

        assert result.exit_code == 1
        assert "<unknown_value>" in result.output

    def test_missing_data_file(self, runner: CliRunner, backend, tmp_path) -> None:
        result = runner.invoke(
            app, ["consul", "write", "--data", str(tmp_path / "absent.json"), "app/db"],
        )

        assert result.exit_code == 1
        assert "<file_error:" in result.output
        assert backend.requests == []

    def test_permission_denied(self, runner: CliRunner, backend) -> None:
        backend.add("GET", "/v1/kv/app/db", status_code=403)

        result = runner.invoke(app, ["consul", "read", "app/db"])

        assert result.exit_code == 1
        assert "Error: not enough permissions" in result.output

    def test_unreachable_remote(self, runner: CliRunner, backend) -> None:
        backend.fail("GET", "/v1/kv/app/db", httpx.ConnectError("connection refused"))

        result = runner.invoke(app, ["consul", "read", "app/db"])

        assert result.exit_code == 1
        assert "Error: remote returned error" in result.output

    def test_token_from_environment(self, runner: CliRunner, backend, monkeypatch) -> None:
        monkeypatch.setenv("CONSUL_HTTP_TOKEN", "env-token")
        backend.add("GET", "/v1/kv/app/db", json=[{"Key": "app/db", "Value": "aGk="}])

        result = runner.invoke(app, ["consul", "read", "app/db"])

        assert result.exit_code == 0
        assert backend.requests[0].headers["X-CONSUL-TOKEN"] == "env-token"

    def test_no_token_header_without_token(self, runner: CliRunner, backend) -> None:
        backend.add("GET", "/v1/kv/app/db", json=[{"Key": "app/db", "Value": "aGk="}])

        runner.invoke(app, ["consul", "read", "app/db"])

        assert "X-CONSUL-TOKEN" not in backend.requests[0].headers

    def test_url_flag(self, runner: CliRunner, backend) -> None:
        backend.add("GET", "/v1/kv/app/db", json=[{"Key": "app/db", "Value": "aGk="}])

        runner.invoke(app, ["consul", "--url", "http://consul.internal:8500/", "read", "app/db"])

        assert str(backend.requests[0].url) == "http://consul.internal:8500/v1/kv/app/db"


class TestEtcdCli:
    """etcd commands end to end."""

    def test_read(self, runner: CliRunner, backend) -> None:
        backend.add(
            "POST",
            "/v3/kv/range",
            json={"kvs": [{"key": b64("/app/db"), "value": b64("secret")}]},
        )

        result = runner.invoke(app, ["etcd", "--creds", "dXNlcjpwYXNz", "read", "/app/db"])

        assert result.exit_code == 0
        assert result.stdout == "secret"
        request = backend.requests[0]
        assert request.headers["Authorization"] == "Basic dXNlcjpwYXNz"
        assert json.loads(request.content) == {"key": b64("/app/db")}

    def test_list(self, runner: CliRunner, backend) -> None:
        backend.add(
            "POST",
            "/v3/kv/range",
            json={"kvs": [{"key": b64("app/db")}, {"key": b64("app/cache/a")}, {"key": b64("app/cache/b")}]},
        )

        result = runner.invoke(app, ["etcd", "list", "app/"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["db", "cache/"]

    def test_missing_key(self, runner: CliRunner, backend) -> None:
        backend.add("POST", "/v3/kv/range", json={"header": {"revision": "3"}})

        result = runner.invoke(app, ["etcd", "read", "/app/missing"])

        assert result.exit_code == 1
        assert "<unknown_value>" in result.output


class TestSystemCli:
    """System commands end to end."""

    def test_config(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["system", "config"])

        assert result.exit_code == 0
        assert "Effective Configuration" in result.stdout

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["system", "version"])

        assert result.exit_code == 0
        assert result.stdout.startswith("kivi ")
