"""Configuration management for streamchat."""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .decoder import DEFAULT_NEWLINE_TOKEN

_DEFAULT_CONFIG_PATH = "~/.config/streamchat/config.yaml"
_DEFAULT_HISTORY_DIR = "~/.local/share/streamchat/history"

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatConfig:
    """Everything one chat turn needs, injected at turn start."""

    server_url: str
    endpoint: str
    model: str
    session_id: str
    history_path: Path
    newline_token: str = DEFAULT_NEWLINE_TOKEN
    timeout: float = 300.0
    spinner: bool = True

    @property
    def stream_url(self) -> str:
        return self.server_url.rstrip("/") + "/" + self.endpoint.lstrip("/")


def new_session_id() -> str:
    return uuid.uuid4().hex[:12]


class ConfigManager:
    """Manage streamchat configuration from YAML."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path or _DEFAULT_CONFIG_PATH).expanduser()
        self.data = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration, writing the defaults on first run."""
        if not self.config_path.exists():
            self._create_default_config()
        return self._read_yaml()

    def _read_yaml(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, "r") as f:
                content = yaml.safe_load(f)
                return content or {}
        except (OSError, yaml.YAMLError) as e:
            _log.warning("error reading config %s: %s", self.config_path, e)
            return {}

    @staticmethod
    def default_config() -> Dict[str, Any]:
        return {
            "server": {
                "url": "${STREAMCHAT_SERVER_URL}",
                "endpoint": "/api/chat/stream",
                "model": "",
                "timeout": 300,
            },
            "stream": {
                "newline_token": DEFAULT_NEWLINE_TOKEN,
            },
            "history": {
                "dir": _DEFAULT_HISTORY_DIR,
            },
            "ui": {
                "spinner": True,
            },
        }

    def _create_default_config(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.dump(self.default_config(), f, default_flow_style=False)

    def _section(self, name: str) -> Dict[str, Any]:
        defaults = self.default_config()[name]
        config = self.data.get(name) or {}
        return {**defaults, **config}

    def _resolve_env_var(self, value: str) -> str:
        """Resolve environment variable references like ${VAR_NAME}."""
        if not isinstance(value, str) or not value.startswith("${") or not value.endswith("}"):
            return value

        var_name = value[2:-1]
        return os.getenv(var_name, "")

    def get_server_url(self) -> str:
        return self._resolve_env_var(self._section("server")["url"]) or "http://localhost:8000"

    def get_history_dir(self) -> Path:
        return Path(self._resolve_env_var(self._section("history")["dir"])).expanduser()

    def get_newline_token(self) -> str:
        return self._section("stream")["newline_token"]

    def history_path_for(self, session_id: str) -> Path:
        return self.get_history_dir() / f"chat_{session_id}.log"

    def get_chat_config(self, session_id: Optional[str] = None) -> ChatConfig:
        """Build the per-session configuration passed to every turn."""
        server = self._section("server")
        session_id = session_id or new_session_id()
        return ChatConfig(
            server_url=self.get_server_url(),
            endpoint=server["endpoint"],
            model=self._resolve_env_var(server.get("model") or ""),
            session_id=session_id,
            history_path=self.history_path_for(session_id),
            newline_token=self.get_newline_token(),
            timeout=float(server.get("timeout") or 300),
            spinner=bool(self._section("ui")["spinner"]),
        )
