"""Incremental decoder for the tagged response stream.

Turns raw transport events into render instructions. Fragments can split a
marker or the newline sentinel at any byte, so text that might still be the
start of one is held back until the next fragment settles it.
"""

import logging
from enum import Enum, auto

from .errors import StreamError
from .events import EndOfStream, ErrorSignal, RawEvent, TextEvent
from .segments import (
    EnterCodeBlock,
    EnterThinking,
    ExitCodeBlock,
    ExitThinking,
    Segment,
    code,
    plain,
    thinking,
)

THINK_OPEN = "<|thinking|>"
THINK_CLOSE = "</|thinking|>"
FENCE = "```"
DEFAULT_NEWLINE_TOKEN = "<|newline|>"

_log = logging.getLogger(__name__)


class _Mode(Enum):
    PLAIN = auto()
    THINKING = auto()
    CODE = auto()


# Markers recognised mid-line in each mode. Fences are handled at line start.
_MARKERS = {
    _Mode.PLAIN: (THINK_OPEN, THINK_CLOSE),
    _Mode.THINKING: (THINK_CLOSE,),
    _Mode.CODE: (THINK_OPEN,),
}


def _partial_suffix(text: str, tokens: tuple[str, ...]) -> int:
    """Length of the longest suffix of *text* that is a proper prefix of a token."""
    longest = max(len(t) for t in tokens) - 1
    for k in range(min(len(text), longest), 0, -1):
        tail = text[-k:]
        if any(t.startswith(tail) for t in tokens):
            return k
    return 0


class StreamDecoder:
    """Stateful decoder that handles arbitrary fragment boundaries.

    Usage:
        decoder = StreamDecoder()
        for event in transport.stream(message):
            for segment in decoder.feed(event):
                renderer.render_incremental(segment)

    An unterminated thinking region or code block is closed implicitly by
    ``finish()``. That is the leniency policy for truncated streams, not an
    error.
    """

    def __init__(self, newline_token: str = DEFAULT_NEWLINE_TOKEN):
        self._newline_token = newline_token
        self._raw_tail = ""
        self._pending = ""
        self._mode = _Mode.PLAIN
        self._at_line_start = True
        self._language = ""
        self._closed = False
        self._out: list[Segment] = []

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def inside_thinking(self) -> bool:
        return self._mode is _Mode.THINKING

    @property
    def inside_code_block(self) -> bool:
        return self._mode is _Mode.CODE

    def feed(self, event: RawEvent) -> list[Segment]:
        """Feed one transport event, returning the segments it settles.

        Raises:
            StreamError: the event is an ``ErrorSignal``.
        """
        if self._closed:
            return []
        if isinstance(event, ErrorSignal):
            self._closed = True
            self._pending = ""
            self._raw_tail = ""
            raise StreamError(event.message)
        if isinstance(event, EndOfStream):
            return self.finish()

        self._pending += self._decode_newlines(event.fragment)
        self._drain(final=False)
        return self._take()

    def finish(self) -> list[Segment]:
        """Flush buffered text and close any open region."""
        if self._closed:
            return []
        # An incomplete sentinel or marker was literal text after all.
        self._pending += self._raw_tail
        self._raw_tail = ""
        self._drain(final=True)

        if self._mode is _Mode.THINKING:
            self._out.append(ExitThinking())
        elif self._mode is _Mode.CODE:
            self._out.append(ExitCodeBlock())
        self._mode = _Mode.PLAIN
        self._language = ""
        self._closed = True
        return self._take()

    def _take(self) -> list[Segment]:
        out, self._out = self._out, []
        return out

    def _decode_newlines(self, fragment: str) -> str:
        data = self._raw_tail + fragment
        token = self._newline_token
        if not token:
            self._raw_tail = ""
            return data
        hold = _partial_suffix(data, (token,))
        if hold:
            data, self._raw_tail = data[:-hold], data[-hold:]
        else:
            self._raw_tail = ""
        return data.replace(token, "\n")

    def _drain(self, final: bool) -> None:
        while self._pending:
            if self._mode is not _Mode.THINKING and self._at_line_start:
                progressed = self._scan_line_start(final)
            else:
                progressed = self._scan_text(final)
            if not progressed:
                return

    def _scan_line_start(self, final: bool) -> bool:
        body = self._pending.lstrip(" \t")
        indent = len(self._pending) - len(body)

        if body.startswith(FENCE):
            end = body.find("\n")
            if end < 0 and not final:
                return False
            if end < 0:
                label, consumed = body[len(FENCE):], len(body)
            else:
                label, consumed = body[len(FENCE):end], end + 1
            self._pending = self._pending[indent + consumed:]
            self._toggle_fence(label.strip())
            return True

        # Whitespace only, or a fence still arriving.
        if not final and FENCE.startswith(body):
            return False

        self._at_line_start = False
        return True

    def _scan_text(self, final: bool) -> bool:
        text = self._pending
        markers = _MARKERS[self._mode]

        hit, marker = -1, ""
        for m in markers:
            i = text.find(m)
            if i >= 0 and (hit < 0 or i < hit):
                hit, marker = i, m

        newline = text.find("\n")
        if newline >= 0 and (hit < 0 or newline < hit):
            self._emit_text(text[:newline + 1])
            self._pending = text[newline + 1:]
            self._at_line_start = True
            return True

        if hit >= 0:
            self._emit_text(text[:hit])
            self._pending = text[hit + len(marker):]
            self._on_marker(marker)
            return True

        hold = 0 if final else _partial_suffix(text, markers)
        ready = text[:len(text) - hold]
        self._emit_text(ready)
        self._pending = text[len(ready):]
        return False

    def _emit_text(self, text: str) -> None:
        if not text:
            return
        if self._mode is _Mode.THINKING:
            self._out.append(thinking(text))
        elif self._mode is _Mode.CODE:
            self._out.append(code(text, self._language))
        else:
            self._out.append(plain(text))

    def _on_marker(self, marker: str) -> None:
        if marker == THINK_OPEN:
            if self._mode is _Mode.CODE:
                # Thinking takes precedence over an open code block.
                self._out.append(ExitCodeBlock())
                self._language = ""
            self._mode = _Mode.THINKING
            self._out.append(EnterThinking())
        elif self._mode is _Mode.THINKING:
            self._mode = _Mode.PLAIN
            self._out.append(ExitThinking())
            self._at_line_start = True
        else:
            _log.debug("dropping stray %s outside a thinking region", THINK_CLOSE)

    def _toggle_fence(self, label: str) -> None:
        if self._mode is _Mode.CODE:
            self._out.append(ExitCodeBlock())
            self._mode = _Mode.PLAIN
            self._language = ""
        else:
            self._mode = _Mode.CODE
            self._language = label
            self._out.append(EnterCodeBlock(label))


def decode_text(raw: str, newline_token: str = DEFAULT_NEWLINE_TOKEN) -> list[Segment]:
    """Decode a complete raw response in one pass."""
    decoder = StreamDecoder(newline_token)
    segments = decoder.feed(TextEvent(raw))
    segments.extend(decoder.finish())
    return segments
