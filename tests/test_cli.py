"""Tests for the click CLI."""

import re
from datetime import datetime

import pytest
import yaml
from click.testing import CliRunner

from streamchat.cli import cli
from streamchat.history import HistoryLog


def _output(result) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", result.output)


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("STREAMCHAT_SERVER_URL", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({
        "history": {"dir": str(tmp_path / "history")},
        "ui": {"spinner": False},
    }))
    return path


def test_config_command(config_path):
    result = CliRunner().invoke(cli, ["--config", str(config_path), "config"])
    assert result.exit_code == 0
    assert "http://localhost:8000/api/chat/stream" in _output(result)
    assert "<|newline|>" in _output(result)


def test_history_empty(config_path):
    result = CliRunner().invoke(cli, ["--config", str(config_path), "history"])
    assert result.exit_code == 0
    assert "No sessions found" in _output(result)


def test_history_lists_sessions(config_path, tmp_path):
    log = HistoryLog(tmp_path / "history" / "chat_s1.log")
    log.append_turn("what is a monad", "a burrito", when=datetime(2026, 1, 1))
    result = CliRunner().invoke(cli, ["--config", str(config_path), "history"])
    assert result.exit_code == 0
    assert "s1" in _output(result)
    assert "what is a monad" in _output(result)


def test_replay_session(config_path, tmp_path):
    log = HistoryLog(tmp_path / "history" / "chat_s1.log")
    log.append_turn("show code", "Here:<|newline|>```py<|newline|>x = 1<|newline|>```", when=datetime(2026, 1, 1))
    log.append_turn("and fail", None, when=datetime(2026, 1, 1))

    result = CliRunner().invoke(cli, ["--config", str(config_path), "replay", "--session", "s1"])
    assert result.exit_code == 0
    assert "show code" in _output(result)
    assert "Here:" in _output(result)
    assert "x = 1" in _output(result)
    assert "no response logged" in _output(result)


def test_replay_defaults_to_latest_session(config_path, tmp_path):
    HistoryLog(tmp_path / "history" / "chat_s1.log").append_turn("q", "answer text")
    result = CliRunner().invoke(cli, ["--config", str(config_path), "replay", "--last", "1"])
    assert result.exit_code == 0
    assert "answer text" in _output(result)


def test_replay_without_sessions(config_path):
    result = CliRunner().invoke(cli, ["--config", str(config_path), "replay"])
    assert result.exit_code != 0
    assert "No sessions logged yet" in _output(result)


def test_replay_unknown_session(config_path, tmp_path):
    HistoryLog(tmp_path / "history" / "chat_s1.log").append_turn("q", "a")
    result = CliRunner().invoke(cli, ["--config", str(config_path), "replay", "--session", "zzz"])
    assert result.exit_code != 0
    assert "not found" in _output(result)
