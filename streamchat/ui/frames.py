"""Box-drawing frame lines shared by the incremental and final renders.

Thinking regions and code blocks are both bracketed by a labelled top rule
and a bottom rule, with a vertical bar prefixed to every body line. Frame
lines stop one cell short of the terminal width so they never soft-wrap.
"""

from rich.text import Text

from .theme import DEFAULT_THEME, StreamChatTheme

TOP_LEFT = "╭"
TOP_RIGHT = "╮"
BOT_LEFT = "╰"
BOT_RIGHT = "╯"
VERT = "│"
HORIZ = "─"

THINKING_LABEL = "thinking"
DEFAULT_CODE_LABEL = "text"


def code_label(language: str) -> str:
    """Display label for a code block; an empty fence label shows as ``text``."""
    return language or DEFAULT_CODE_LABEL


def frame_top(label: str, width: int, theme: StreamChatTheme = DEFAULT_THEME) -> Text:
    """``╭─ label ──────╮`` spanning ``width - 1`` cells."""
    fill = max(width - len(label) - 6, 1)
    top = Text()
    top.append(f"{TOP_LEFT}{HORIZ} ", style=theme.frame_style)
    top.append(label, style=theme.label_style)
    top.append(" " + HORIZ * fill + TOP_RIGHT, style=theme.frame_style)
    return top


def frame_bottom(width: int, theme: StreamChatTheme = DEFAULT_THEME) -> Text:
    fill = max(width - 3, 1)
    return Text(BOT_LEFT + HORIZ * fill + BOT_RIGHT, style=theme.frame_style)


def frame_prefix(theme: StreamChatTheme = DEFAULT_THEME) -> Text:
    return Text(f"{VERT} ", style=theme.frame_style)
