"""Tests for configuration system."""

from pathlib import Path

import yaml

from streamchat.config import ChatConfig, ConfigManager


def test_config_creation(tmp_path):
    config_path = tmp_path / "config.yaml"
    manager = ConfigManager(str(config_path))

    assert config_path.exists()
    assert "server" in manager.data
    assert manager.data["stream"]["newline_token"] == "<|newline|>"


def test_default_server_url(tmp_path, monkeypatch):
    monkeypatch.delenv("STREAMCHAT_SERVER_URL", raising=False)
    manager = ConfigManager(str(tmp_path / "config.yaml"))
    assert manager.get_server_url() == "http://localhost:8000"


def test_env_var_resolution(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAMCHAT_SERVER_URL", "http://gpu-box:9000")
    manager = ConfigManager(str(tmp_path / "config.yaml"))
    assert manager.get_server_url() == "http://gpu-box:9000"


def test_non_env_var_passthrough(tmp_path):
    manager = ConfigManager(str(tmp_path / "config.yaml"))
    assert manager._resolve_env_var("plain_value") == "plain_value"


def test_values_from_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({
        "server": {"url": "http://127.0.0.1:5000/", "endpoint": "stream", "model": "llama"},
        "stream": {"newline_token": "\\n"},
        "history": {"dir": str(tmp_path / "logs")},
        "ui": {"spinner": False},
    }))
    config = ConfigManager(str(config_path)).get_chat_config("sess01")

    assert config.stream_url == "http://127.0.0.1:5000/stream"
    assert config.model == "llama"
    assert config.newline_token == "\\n"
    assert config.history_path == tmp_path / "logs" / "chat_sess01.log"
    assert config.spinner is False
    assert config.timeout == 300.0


def test_partial_file_falls_back_to_defaults(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({"server": {"model": "mistral"}}))
    config = ConfigManager(str(config_path)).get_chat_config("s")

    assert config.endpoint == "/api/chat/stream"
    assert config.model == "mistral"
    assert config.newline_token == "<|newline|>"


def test_session_id_generated(tmp_path):
    manager = ConfigManager(str(tmp_path / "config.yaml"))
    first = manager.get_chat_config()
    second = manager.get_chat_config()
    assert len(first.session_id) == 12
    assert first.session_id != second.session_id
    assert first.history_path.name == f"chat_{first.session_id}.log"


def test_unreadable_yaml_gives_empty_config(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("server: [unclosed")
    manager = ConfigManager(str(config_path))
    assert manager.data == {}
    assert manager.get_chat_config("s").endpoint == "/api/chat/stream"


def test_chat_config_url_join():
    config = ChatConfig(
        server_url="http://host:1/",
        endpoint="/api/chat/stream",
        model="",
        session_id="s",
        history_path=Path("x.log"),
    )
    assert config.stream_url == "http://host:1/api/chat/stream"
