"""Single-line markdown renderer for inline styling.

Used by the final render for plain prose. Fenced code blocks never reach
this module; the decoder routes them to the code container instead.
"""

import re

from rich.text import Text

from .theme import DEFAULT_THEME, ColorPalette

_INLINE_CODE = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"(?<!\*)\*([^*\s][^*]*)\*(?!\*)")
_STRIKE = re.compile(r"~~(.+?)~~")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_HEADER = re.compile(r"^(#{1,6})\s+(.*)")
_NUMBERED = re.compile(r"^(\s*\d+\.)\s+(.*)")
_RULE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")


def render_markdown_line(line: str, palette: ColorPalette | None = None) -> Text:
    """Convert a single markdown line to styled Rich Text.

    Handles headers, bullet and numbered lists, block quotes, horizontal
    rules, and the inline spans (code, bold, italic, strikethrough, links).
    A line with none of these comes back unchanged in the plain text style.
    """
    palette = palette or DEFAULT_THEME.palette

    m = _HEADER.match(line)
    if m:
        level = len(m.group(1))
        style = palette.text_bright if level <= 2 else palette.text
        return Text(m.group(2), style=f"bold {style}")

    if _RULE.match(line):
        return Text("─" * 40, style=f"dim {palette.border}")

    stripped = line.lstrip()
    indent = line[: len(line) - len(stripped)]

    if stripped.startswith("> ") or stripped == ">":
        t = Text(indent)
        t.append("┃ ", style=f"dim {palette.text_dim}")
        t.append_text(_inline_format(stripped[2:], palette, base=f"italic {palette.text}"))
        return t

    if stripped.startswith(("- ", "* ", "+ ")):
        t = Text(indent)
        t.append("•", style=palette.text_dim)
        t.append_text(_inline_format(f" {stripped[2:]}", palette))
        return t

    m = _NUMBERED.match(line)
    if m:
        t = Text()
        t.append(m.group(1), style=palette.text_dim)
        t.append_text(_inline_format(f" {m.group(2)}", palette))
        return t

    return _inline_format(line, palette)


def _inline_format(text: str, palette: ColorPalette, base: str | None = None) -> Text:
    """Apply inline spans to text; unmatched stretches keep the base style."""
    base = base or palette.text
    spans = []
    for kind, pattern in (
        ("code", _INLINE_CODE),
        ("bold", _BOLD),
        ("italic", _ITALIC),
        ("strike", _STRIKE),
        ("link", _LINK),
    ):
        for m in pattern.finditer(text):
            spans.append((m.start(), m.end(), kind, m.group(1)))

    # Earliest span wins where two overlap.
    spans.sort(key=lambda s: s[0])
    result = Text()
    pos = 0
    for start, end, kind, content in spans:
        if start < pos:
            continue
        if start > pos:
            result.append(text[pos:start], style=base)
        if kind == "code":
            result.append(content, style=f"on {palette.surface} {palette.inline_code}")
        elif kind == "bold":
            result.append(content, style=f"bold {palette.text_bright}")
        elif kind == "italic":
            result.append(content, style=f"italic {palette.text}")
        elif kind == "strike":
            result.append(content, style=f"strike {palette.text_dim}")
        else:
            result.append(content, style=f"underline {palette.inline_code}")
        pos = end

    if pos < len(text):
        result.append(text[pos:], style=base)
    return result
