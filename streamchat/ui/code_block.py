"""Bordered code block container with syntax highlighting.

The final render shows every fenced block in a box carrying the language
label, with line numbers and Pygments highlighting through Rich's Syntax.
"""

from rich.cells import cell_len, chop_cells
from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from .frames import code_label, frame_bottom, frame_prefix, frame_top
from .theme import DEFAULT_THEME, StreamChatTheme

GUTTER = 4


def highlight_lines(code: str, language: str, theme: StreamChatTheme = DEFAULT_THEME) -> list[Text]:
    """Syntax-highlight a whole block and return one Text per source line.

    The block is lexed in one pass so tokens spanning lines (docstrings,
    block comments) keep their style. An empty language uses the plain
    code style.
    """
    source = code.split("\n")
    if not language:
        return [Text(line, style=theme.code_style) for line in source]
    syn = Syntax(code, language, theme=theme.syntax_theme, line_numbers=False, word_wrap=False)
    lines = list(syn.highlight(code).split("\n", allow_blank=True))[: len(source)]
    for line in lines:
        line.rstrip()
    return lines


def fold_line(line: Text, width: int) -> list[Text]:
    """Cut *line* into pieces at most *width* cells wide without dropping characters."""
    if width < 1 or cell_len(line.plain) <= width:
        return [line]
    offsets = []
    position = 0
    for piece in chop_cells(line.plain, width)[:-1]:
        position += len(piece)
        offsets.append(position)
    return list(line.divide(offsets))


def render_code_container(
    code: str,
    language: str = "",
    console: Console | None = None,
    theme: StreamChatTheme = DEFAULT_THEME,
) -> None:
    """Render a bordered code block with syntax highlighting.

    Args:
        code: The code string (without fences).
        language: Language label from the opening fence, may be empty.
        console: Rich Console to print to.
    """
    from .theme import console as default_console

    con = console or default_console
    width = con.width or 80
    palette = theme.palette

    con.print(frame_top(code_label(language), width, theme), soft_wrap=True)

    code = code.rstrip("\n") if code.strip("\n") else ""
    lines = highlight_lines(code, language, theme) if code else []
    # long lines continue on extra rows under a blank gutter
    body_width = width - 1 - cell_len(frame_prefix(theme).plain) - GUTTER
    for i, line in enumerate(lines):
        for n, piece in enumerate(fold_line(line, body_width)):
            row = frame_prefix(theme)
            row.append(f"{i + 1:>3} " if n == 0 else " " * GUTTER, style=palette.text_muted)
            row.append_text(piece)
            con.print(row, no_wrap=True)

    con.print(frame_bottom(width, theme), soft_wrap=True)
