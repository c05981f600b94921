import json

import pytest

from aistudio_mcp import cli, server

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    # main() reconfigures the root logger; keep pytest's handlers intact
    monkeypatch.setattr(cli, "_configure_logging", lambda level: None)


class _FakeServer:
    ran = False

    def __init__(self, config):
        self.config = config

    async def run_stdio(self):
        type(self).ran = True


def test_missing_api_key_exits_with_error(caplog):
    assert cli.main([]) == 1
    assert "GEMINI_API_KEY environment variable is required" in caplog.text


def test_invalid_setting_exits_with_error(monkeypatch):
    monkeypatch.setenv("GEMINI_MAX_FILES", "many")

    assert cli.main([]) == 1


def test_check_config_prints_redacted_summary(monkeypatch, capsys):
    monkeypatch.setenv("GEMINI_API_KEY", "secret-key")

    assert cli.main(["--check-config"]) == 0

    summary = json.loads(capsys.readouterr().out)
    assert summary["api_key"] == "<redacted>"
    assert "secret-key" not in json.dumps(summary)


def test_check_config_without_key_fails(capsys):
    assert cli.main(["--check-config"]) == 1
    assert json.loads(capsys.readouterr().out)["api_key"] is None


def test_serves_over_stdio_when_configured(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setattr(server, "AIStudioServer", _FakeServer)

    assert cli.main(["--log-level", "debug"]) == 0
    assert _FakeServer.ran


def test_server_initialization_failure_logs_the_cause(monkeypatch, caplog):
    def broken(config):
        raise RuntimeError("no client")

    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setattr(server, "AIStudioServer", broken)

    assert cli.main([]) == 1
    assert "Failed to initialize server" in caplog.text
    assert "RuntimeError: no client" in caplog.text
