"""One-line notices printed around chat turns."""

from rich.console import Console
from rich.text import Text

from .theme import DEFAULT_THEME, console


def render_error(text: str, con: Console | None = None) -> None:
    """Render an error message."""
    palette = DEFAULT_THEME.palette
    err = Text()
    err.append("err ", style=f"bold {palette.error}")
    err.append("| ", style=f"dim {palette.text_muted}")
    err.append(text, style=palette.error)
    (con or console).print(err)


def render_user_line(text: str, con: Console | None = None) -> None:
    """Echo a user message from the history log."""
    palette = DEFAULT_THEME.palette
    line = Text()
    line.append("you ", style=f"bold {palette.user}")
    line.append("| ", style=f"dim {palette.text_muted}")
    line.append(text, style=palette.text_bright)
    (con or console).print(line)


def render_notice(text: str, con: Console | None = None) -> None:
    palette = DEFAULT_THEME.palette
    (con or console).print(Text(text, style=f"dim {palette.text_dim}"))
