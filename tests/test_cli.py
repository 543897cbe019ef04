"""Tests for the contentintel command-line interface."""

import json
import logging

import pytest

from conftest import MockLLMClient, TOOL_RESPONSE

from contentintel.cli import main
from contentintel.core.store import ConfigStore

CONFIG = """
dispatcher:
  max_workers: 2
  engine_timeout: 5
admin:
  username: admin
  password: s3cret
logging:
  level: WARNING
"""


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Run the CLI against a temporary config and state file."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(CONFIG)
    state_path = tmp_path / "state.json"
    client = MockLLMClient(response=TOOL_RESPONSE)
    monkeypatch.setattr("contentintel.features.client.create_llm_client", lambda config: client)
    monkeypatch.delenv("CONTENTINTEL_ADMIN_PASSWORD", raising=False)

    def _run(*argv):
        return main(["--config", str(config_path), "--state-file", str(state_path), *argv])

    _run.state_path = state_path
    _run.client = client
    return _run


def admin(run, *argv, password="s3cret"):
    return run("admin", "--password", password, *argv)


class TestAnalyze:
    def test_text_report(self, run, capsys):
        assert run("analyze", "https://example.com/app") == 0
        out = capsys.readouterr().out
        assert "CONTENT INTELLIGENCE REPORT" in out
        assert "safetyRating: A" in out
        assert run.client.call_count == 1

    def test_json_output(self, run, capsys):
        assert run("analyze", "https://example.com/app", "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["category"] == "tool"
        assert data["resultOrigin"] == "engine"

    def test_saves_report(self, run, tmp_path, capsys):
        report = tmp_path / "report.json"
        assert run("analyze", "https://example.com/app", "--output", str(report)) == 0
        saved = json.loads(report.read_text())
        assert saved["category"] == "tool"
        assert saved["result"]["safetyRating"] == "A"

    def test_denied_request_exit_code(self, run, capsys):
        assert admin(run, "toggle", "tool", "off") == 0
        assert run("analyze", "https://example.com/app") == 3
        assert "DENIED (503)" in capsys.readouterr().out
        assert run.client.call_count == 0

    def test_empty_content(self, run, capsys):
        assert run("analyze", "   ") == 2


class TestCallerCommands:
    def test_upgrade_and_user_status(self, run, capsys):
        assert run("upgrade", "a@b.com", "pure") == 0
        capsys.readouterr()
        assert run("user-status", "a@b.com") == 0
        assert json.loads(capsys.readouterr().out)["access_level"] == 7

    def test_status(self, run, capsys):
        assert run("status", "--caller", "a@b.com") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["caller"] == "a@b.com"
        assert set(data["categories"]) == {"news", "tool", "media", "audio"}

    def test_history(self, run, capsys):
        assert admin(run, "sync", "on") == 0
        run("analyze", "https://example.com/app")
        capsys.readouterr()
        assert run("history", "--json") == 0
        entries = json.loads(capsys.readouterr().out)
        assert len(entries) == 1
        assert entries[0]["category"] == "tool"


class TestAdmin:
    def test_wrong_password(self, run, capsys):
        assert admin(run, "master", "off", password="nope") == 4
        assert "Invalid administrator credentials" in capsys.readouterr().err
        assert all(ConfigStore(run.state_path).feature_flags().values())

    def test_password_from_environment(self, run, monkeypatch, capsys):
        monkeypatch.setenv("CONTENTINTEL_ADMIN_PASSWORD", "s3cret")
        assert run("admin", "paywall", "on") == 0
        assert ConfigStore(run.state_path).paywall_enabled() is True

    def test_master_override(self, run, capsys):
        assert admin(run, "master", "off") == 0
        flags = ConfigStore(run.state_path).feature_flags()
        assert not any(flags.values())

    def test_prices(self, run, capsys):
        assert admin(run, "prices", "--starter", "15") == 0
        assert ConfigStore(run.state_path).tier_prices()["starter"] == "15"

    def test_invalid_price(self, run, capsys):
        assert admin(run, "prices", "--elite", "lots") == 1

    def test_remove_unknown_user(self, run, capsys):
        assert admin(run, "remove-user", "ghost@b.com") == 1

    def test_system_status(self, run, capsys):
        assert admin(run, "status") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["paywall_enabled"] is False
        assert data["user_count"] == 0
