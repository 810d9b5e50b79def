"""Terminal rendering for streamed chat responses."""

from .theme import DEFAULT_THEME, ColorPalette, StreamChatTheme, console, render_header
from .output import render_error, render_notice, render_user_line
from .markdown import render_markdown_line
from .code_block import render_code_container
from .thinking import render_thinking_block
from .ledger import EraseLedger, physical_rows
from .size import ConsoleSize, FixedSize, TerminalSize
from .spinner import WaitingIndicator
from .stream import RenderMode, RenderState, TerminalRenderer, TurnPhase

__all__ = [
    "DEFAULT_THEME",
    "ColorPalette",
    "StreamChatTheme",
    "console",
    "render_header",
    "render_error",
    "render_notice",
    "render_user_line",
    "render_markdown_line",
    "render_code_container",
    "render_thinking_block",
    "EraseLedger",
    "physical_rows",
    "ConsoleSize",
    "FixedSize",
    "TerminalSize",
    "WaitingIndicator",
    "RenderMode",
    "RenderState",
    "TerminalRenderer",
    "TurnPhase",
]
