"""Two-pass terminal renderer for streamed responses.

While a turn streams, decoded segments are written straight to the terminal
so the user sees progress. Once the stream ends that provisional output is
erased and the whole response is decoded again from the raw text and drawn
with full formatting. Only the second pass knows where every block really
ends, so it is the version that stays on screen.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto

from rich.console import Console
from rich.text import Text

from ..decoder import DEFAULT_NEWLINE_TOKEN, decode_text
from ..errors import RenderStateError
from ..segments import (
    EnterCodeBlock,
    EnterThinking,
    ExitCodeBlock,
    ExitThinking,
    RenderSegment,
    Segment,
    SegmentKind,
)
from .code_block import render_code_container
from .frames import THINKING_LABEL, code_label, frame_bottom, frame_prefix, frame_top
from .ledger import EraseLedger
from .markdown import render_markdown_line
from .size import ConsoleSize, TerminalSize
from .theme import DEFAULT_THEME, StreamChatTheme
from .thinking import render_thinking_block

_log = logging.getLogger(__name__)


class RenderMode(Enum):
    INCREMENTAL = auto()
    FINAL = auto()


class TurnPhase(Enum):
    IDLE = auto()
    STREAMING = auto()
    ERASING = auto()
    FINAL_RENDER = auto()


@dataclass
class RenderState:
    mode: RenderMode = RenderMode.INCREMENTAL
    inside_thinking: bool = False
    inside_code_block: bool = False
    code_language: str = ""
    cursor_line: int = 0


@dataclass
class _Block:
    kind: SegmentKind
    text: str = ""
    language: str = ""


def build_blocks(segments: list[Segment]) -> list[_Block]:
    """Group a decoded segment sequence into whole regions."""
    blocks: list[_Block] = []
    current: _Block | None = None
    for seg in segments:
        if isinstance(seg, EnterThinking):
            current = _Block(SegmentKind.THINKING)
            blocks.append(current)
        elif isinstance(seg, EnterCodeBlock):
            current = _Block(SegmentKind.CODE, language=seg.language)
            blocks.append(current)
        elif isinstance(seg, (ExitThinking, ExitCodeBlock)):
            current = None
        elif isinstance(seg, RenderSegment):
            if current is None or current.kind is not seg.kind:
                current = _Block(seg.kind, language=seg.language)
                blocks.append(current)
            current.text += seg.text
    return blocks


class TerminalRenderer:
    """Renders one chat turn at a time: stream, erase, redraw.

    Usage:
        renderer = TerminalRenderer(console)
        for segment in segments:
            renderer.render_incremental(segment)
        renderer.erase_incremental_output()
        renderer.render_final(raw_text)
    """

    def __init__(
        self,
        console: Console,
        size: TerminalSize | None = None,
        theme: StreamChatTheme = DEFAULT_THEME,
        newline_token: str = DEFAULT_NEWLINE_TOKEN,
    ):
        self._console = console
        self._size = size or ConsoleSize(console)
        self._theme = theme
        self._newline_token = newline_token
        self._phase = TurnPhase.IDLE
        self._state = RenderState()
        self._ledger = EraseLedger()
        self._line_open = False

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def ledger(self) -> EraseLedger:
        return self._ledger

    # -- incremental pass --

    def render_incremental(self, item: Segment) -> None:
        """Write one decoded segment or boundary event immediately."""
        if self._phase is TurnPhase.IDLE:
            self._begin_turn()
        elif self._phase is not TurnPhase.STREAMING:
            raise RenderStateError(f"cannot stream while {self._phase.name.lower()}")

        state = self._state
        width = self._size.columns()
        if isinstance(item, EnterThinking):
            self._close_line()
            self._write(frame_top(THINKING_LABEL, width, self._theme), newline=True)
            state.inside_thinking = True
        elif isinstance(item, ExitThinking):
            self._close_line()
            self._write(frame_bottom(width, self._theme), newline=True)
            state.inside_thinking = False
        elif isinstance(item, EnterCodeBlock):
            self._close_line()
            self._write(frame_top(code_label(item.language), width, self._theme), newline=True)
            state.inside_code_block = True
            state.code_language = item.language
        elif isinstance(item, ExitCodeBlock):
            self._close_line()
            self._write(frame_bottom(width, self._theme), newline=True)
            state.inside_code_block = False
            state.code_language = ""
        elif item.kind is SegmentKind.PLAIN:
            self._write_plain(item.text)
        else:
            style = self._theme.thinking_style if item.kind is SegmentKind.THINKING else self._theme.code_style
            self._write_framed(item.text, style)

    def erase_incremental_output(self) -> int:
        """Clear everything the incremental pass wrote. Returns rows moved up.

        Row accounting uses the terminal width now, not when the text was
        written. With nothing recorded this writes nothing at all.
        """
        if self._phase not in (TurnPhase.IDLE, TurnPhase.STREAMING):
            raise RenderStateError(f"cannot erase while {self._phase.name.lower()}")
        self._phase = TurnPhase.ERASING

        if self._ledger.is_empty:
            return 0
        width = self._size.columns()
        rows = self._ledger.rows(width)
        _log.debug("erasing %d rows of incremental output at width %d", rows, width)
        out = self._console.file
        out.write(self._ledger.erase_sequence(width))
        out.flush()
        self._ledger.clear()
        self._line_open = False
        return rows

    # -- final pass --

    def render_final(self, full_raw_text: str) -> None:
        """Decode *full_raw_text* from scratch and draw it fully formatted."""
        if self._phase is not TurnPhase.ERASING:
            raise RenderStateError(f"final render must follow erase, not {self._phase.name.lower()}")
        self._phase = TurnPhase.FINAL_RENDER
        self._state = RenderState(mode=RenderMode.FINAL)
        try:
            self.draw(full_raw_text)
        finally:
            self._phase = TurnPhase.IDLE

    def draw(self, raw_text: str) -> None:
        """Write the formatted rendering of a raw response, no turn bookkeeping.

        Also used to replay responses read back from the history log.
        """
        after_frame = False
        for block in build_blocks(decode_text(raw_text, self._newline_token)):
            if block.kind is SegmentKind.THINKING:
                self._state.inside_thinking = True
                render_thinking_block(block.text, self._console, self._theme)
                self._state.inside_thinking = False
                after_frame = True
            elif block.kind is SegmentKind.CODE:
                self._state.inside_code_block = True
                self._state.code_language = block.language
                render_code_container(block.text, block.language, self._console, self._theme)
                self._state.inside_code_block = False
                self._state.code_language = ""
                after_frame = True
            else:
                text = block.text.lstrip("\n") if after_frame else block.text
                self._draw_prose(text)
                after_frame = False

    def _draw_prose(self, text: str) -> None:
        if not text:
            return
        lines = text.split("\n")
        if text.endswith("\n"):
            lines.pop()
        palette = self._theme.palette
        for line in lines:
            self._console.print(render_markdown_line(line, palette), soft_wrap=True)
            self._state.cursor_line += 1

    # -- turn bookkeeping --

    def abort(self) -> None:
        """Finish a failed turn, leaving the provisional output on screen."""
        if self._line_open:
            self._console.file.write("\n")
            self._console.file.flush()
        self._ledger.clear()
        self._line_open = False
        self._state = RenderState()
        self._phase = TurnPhase.IDLE

    def _begin_turn(self) -> None:
        self._ledger.clear()
        self._state = RenderState()
        self._line_open = False
        self._phase = TurnPhase.STREAMING

    def _close_line(self) -> None:
        if self._line_open:
            self._write(Text(), newline=True)

    def _write_plain(self, text: str) -> None:
        self._write(Text(text, style=self._theme.plain_style))

    def _write_framed(self, text: str, style: str) -> None:
        """Write region text with the frame bar at the start of every line."""
        for piece in text.splitlines(keepends=True):
            row = Text()
            if not self._line_open:
                row.append_text(frame_prefix(self._theme))
            row.append(piece, style=style)
            self._write(row)

    def _write(self, text: Text, newline: bool = False) -> None:
        if newline:
            text.append("\n")
        plain = text.plain
        if not plain:
            return
        with self._console.capture() as capture:
            self._console.print(text, end="", soft_wrap=True)
        written = capture.get()
        out = self._console.file
        out.write(written)
        out.flush()
        self._ledger.append(written)
        self._state.cursor_line += plain.count("\n")
        self._line_open = not plain.endswith("\n")
