"""Tests for the command-line interface."""

import httpx
from click.testing import CliRunner

from boomi_proxy import __version__
from boomi_proxy.cli import cli


def fake_proxy(monkeypatch, handler):
    """Route the CLI's httpx calls to ``handler``."""
    calls = []

    def request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        return handler(method, url, **kwargs)

    monkeypatch.setattr(httpx, "request", request)
    return calls


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_writes_config():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["init"], obj={})

        assert result.exit_code == 0
        with open("boomi-proxy.yaml") as f:
            assert "api.boomi.com" in f.read()


def test_listener_rejects_bad_action():
    result = CliRunner().invoke(cli, ["listener", "start", "dep-1"], obj={})

    assert result.exit_code == 2


def test_listener_sends_body_credentials(monkeypatch):
    calls = fake_proxy(monkeypatch, lambda method, url, **kw: httpx.Response(
        200, json={"success": True, "message": "Listener enabled successfully"}
    ))

    result = CliRunner().invoke(
        cli,
        ["--url", "http://proxy:9", "listener", "enable", "dep-1", "-a", "acct", "-u", "ada", "--password", "pw"],
        obj={},
    )

    assert result.exit_code == 0
    method, url, kwargs = calls[0]
    assert (method, url) == ("POST", "http://proxy:9/api/deployment/dep-1/listener/enable")
    assert kwargs["json"] == {"accountId": "acct", "username": "ada", "password": "pw"}


def test_credentials_from_environment(monkeypatch):
    calls = fake_proxy(monkeypatch, lambda method, url, **kw: httpx.Response(200, json=[]))

    result = CliRunner().invoke(
        cli,
        ["deployments", "list", "--process-id", "p-1"],
        obj={},
        env={"BOOMI_ACCOUNT_ID": "acct", "BOOMI_USERNAME": "ada", "BOOMI_PASSWORD": "pw"},
    )

    assert result.exit_code == 0
    _, url, kwargs = calls[0]
    assert url.endswith("/api/deployments")
    assert kwargs["params"] == {"accountId": "acct", "username": "ada", "password": "pw", "processId": "p-1"}


def test_error_response_exits_nonzero(monkeypatch):
    fake_proxy(monkeypatch, lambda method, url, **kw: httpx.Response(
        400, json={"error": "Missing required authentication parameters"}
    ))

    result = CliRunner().invoke(cli, ["deployments", "type", "dep-1"], obj={}, env={
        "BOOMI_ACCOUNT_ID": "", "BOOMI_USERNAME": "", "BOOMI_PASSWORD": "",
    })

    assert result.exit_code == 1


def test_unreachable_proxy(monkeypatch):
    def refuse(method, url, **kw):
        raise httpx.ConnectError("refused")

    fake_proxy(monkeypatch, refuse)

    result = CliRunner().invoke(cli, ["status"], obj={})

    assert result.exit_code == 1


def test_url_help_points_at_reported_port():
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "port `start` reports" in " ".join(result.output.split())
