"""Event sources for chat turns."""

from .base import BaseTransport, ScriptedTransport
from .sse import SSETransport, iter_events, parse_sse_line

__all__ = [
    "BaseTransport",
    "ScriptedTransport",
    "SSETransport",
    "iter_events",
    "parse_sse_line",
]
