"""Framed, de-emphasised rendering of a model's thinking region."""

from rich.console import Console

from .frames import THINKING_LABEL, frame_bottom, frame_prefix, frame_top
from .theme import DEFAULT_THEME, StreamChatTheme


def render_thinking_block(
    text: str,
    console: Console | None = None,
    theme: StreamChatTheme = DEFAULT_THEME,
) -> None:
    """Render a complete thinking region. Blank edges are trimmed; an empty
    region renders nothing."""
    from .theme import console as default_console

    con = console or default_console
    body = text.strip("\n")
    if not body.strip():
        return

    width = con.width or 80
    con.print(frame_top(THINKING_LABEL, width, theme), soft_wrap=True)
    for line in body.split("\n"):
        row = frame_prefix(theme)
        row.append(line, style=theme.thinking_style)
        con.print(row, soft_wrap=True)
    con.print(frame_bottom(width, theme), soft_wrap=True)
