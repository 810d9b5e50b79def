"""Render instructions produced by the stream decoder.

A decoded stream is a flat sequence of text segments and boundary events.
Boundary events mark where a thinking region or a code block opens and
closes; text segments carry the kind of region they belong to.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class SegmentKind(Enum):
    PLAIN = "plain"
    THINKING = "thinking"
    CODE = "code"


@dataclass(frozen=True)
class RenderSegment:
    """A run of decoded text belonging to a single region."""

    kind: SegmentKind
    text: str
    language: str = ""


@dataclass(frozen=True)
class EnterThinking:
    pass


@dataclass(frozen=True)
class ExitThinking:
    pass


@dataclass(frozen=True)
class EnterCodeBlock:
    language: str = ""


@dataclass(frozen=True)
class ExitCodeBlock:
    pass


Segment = Union[RenderSegment, EnterThinking, ExitThinking, EnterCodeBlock, ExitCodeBlock]


def plain(text: str) -> RenderSegment:
    return RenderSegment(SegmentKind.PLAIN, text)


def thinking(text: str) -> RenderSegment:
    return RenderSegment(SegmentKind.THINKING, text)


def code(text: str, language: str = "") -> RenderSegment:
    return RenderSegment(SegmentKind.CODE, text, language)
