"""Base transport interface for model servers."""

from abc import ABC, abstractmethod
from typing import Iterator

from ..events import RawEvent


class BaseTransport(ABC):
    """Abstract source of raw stream events for one chat turn."""

    @abstractmethod
    def stream(self, message: str) -> Iterator[RawEvent]:
        """Send a user message and yield the server's events in order.

        The iterator ends after ``EndOfStream`` or ``ErrorSignal``.
        """
        pass

    def close(self) -> None:
        pass


class ScriptedTransport(BaseTransport):
    """Replays a fixed list of events; used for offline runs and tests."""

    def __init__(self, events: list[RawEvent]):
        self.events = list(events)
        self.messages: list[str] = []

    def stream(self, message: str) -> Iterator[RawEvent]:
        self.messages.append(message)
        yield from self.events
