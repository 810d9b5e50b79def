"""Conversation history."""

from .log import HistoryEntry, HistoryLog, HistoryTurn, list_sessions

__all__ = ["HistoryEntry", "HistoryLog", "HistoryTurn", "list_sessions"]
