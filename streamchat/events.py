"""Raw transport events consumed by the stream decoder."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextEvent:
    """A text fragment. Newlines are still sentinel-encoded."""

    fragment: str


@dataclass(frozen=True)
class ErrorSignal:
    """Explicit error reported by the server."""

    message: str


@dataclass(frozen=True)
class EndOfStream:
    """The server finished the response."""


RawEvent = Union[TextEvent, ErrorSignal, EndOfStream]
