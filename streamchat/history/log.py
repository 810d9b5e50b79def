"""Append-only flat-file conversation history.

One file per session. Each turn appends three lines::

    [2026-10-18 14:02:11] User: how do I list files?
    [2026-10-18 14:02:15] AI: Use ls.<|newline|>```sh<|newline|>ls -la<|newline|>```
    <blank>

The AI line holds the raw response exactly as streamed, newlines still
sentinel-encoded, so it can be fed back to the final renderer unchanged.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..decoder import DEFAULT_NEWLINE_TOKEN

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
USER = "User"
AI = "AI"

_ENTRY = re.compile(r"^\[(?P<ts>[^\]]+)\] (?P<role>User|AI): (?P<text>.*)$")


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: str
    role: str
    text: str


@dataclass(frozen=True)
class HistoryTurn:
    user: HistoryEntry
    ai: Optional[HistoryEntry] = None


class HistoryLog:
    """Conversation log for a single session."""

    def __init__(self, path: Path, newline_token: str = DEFAULT_NEWLINE_TOKEN):
        self.path = Path(path).expanduser()
        self.newline_token = newline_token

    def _encode(self, text: str) -> str:
        text = text.replace("\r\n", "\n")
        if self.newline_token:
            return text.replace("\n", self.newline_token)
        return text.replace("\n", " ")

    def append_turn(
        self,
        user_message: str,
        raw_response: Optional[str],
        when: Optional[datetime] = None,
    ) -> None:
        """Append one turn. ``raw_response`` is None when the turn failed."""
        stamp = (when or datetime.now()).strftime(TIMESTAMP_FORMAT)
        lines = [f"[{stamp}] {USER}: {self._encode(user_message)}"]
        if raw_response is not None:
            lines.append(f"[{stamp}] {AI}: {self._encode(raw_response)}")
        lines.append("")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8", newline="") as f:
            f.write("\n".join(lines) + "\n")

    def entries(self) -> list[HistoryEntry]:
        """Parse the log. Lines that are not entries are ignored."""
        if not self.path.exists():
            return []
        entries = []
        # only \n ends an entry; a bare \r belongs to the response text
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
        for line in content.split("\n"):
            m = _ENTRY.match(line)
            if m:
                entries.append(HistoryEntry(m.group("ts"), m.group("role"), m.group("text")))
        return entries

    def turns(self) -> list[HistoryTurn]:
        """Pair each user entry with the AI entry that follows it, if any."""
        turns: list[HistoryTurn] = []
        for entry in self.entries():
            if entry.role == USER:
                turns.append(HistoryTurn(user=entry))
            elif turns and turns[-1].ai is None:
                turns[-1] = HistoryTurn(user=turns[-1].user, ai=entry)
        return turns

    def responses(self) -> list[str]:
        return [e.text for e in self.entries() if e.role == AI]


def list_sessions(history_dir: Path) -> list[tuple[str, Path]]:
    """Session ids with their log files, most recently written first."""
    history_dir = Path(history_dir).expanduser()
    if not history_dir.is_dir():
        return []
    logs = sorted(history_dir.glob("chat_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    return [(p.stem[len("chat_"):], p) for p in logs]
