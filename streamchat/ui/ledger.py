"""Erase ledger: what the incremental render put on screen.

Only used to work out how far to move the cursor back up before the final
render overwrites the provisional output.
"""

import re

from rich.cells import cell_len

# CSI sequences (SGR colours, cursor moves) and OSC hyperlinks occupy no cells.
_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")

CURSOR_UP = "\x1b[{}A"
CLEAR_TO_END = "\x1b[J"


def visible_text(text: str) -> str:
    """Strip escape sequences, leaving what occupies terminal cells."""
    return _ESCAPE.sub("", text)


def physical_rows(text: str, width: int) -> int:
    """Rows the cursor moved down while *text* was written from column 0.

    Every completed line takes at least one row, more when it soft-wraps.
    A trailing partial line only adds rows for the wraps inside it; a line
    exactly ``width`` cells wide leaves the cursor on its own row.
    """
    if not text:
        return 0
    width = max(width, 1)
    lines = visible_text(text).replace("\r", "").split("\n")
    rows = 0
    for line in lines[:-1]:
        cells = cell_len(line.expandtabs())
        rows += max(1, -(-cells // width))
    last = cell_len(lines[-1].expandtabs())
    rows += max(last - 1, 0) // width
    return rows


class EraseLedger:
    """Append-only record of the text written during one incremental render."""

    def __init__(self):
        self._chunks: list[str] = []

    def append(self, written: str) -> None:
        if written:
            self._chunks.append(written)

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    @property
    def is_empty(self) -> bool:
        return not self._chunks

    def rows(self, width: int) -> int:
        return physical_rows(self.text, width)

    def erase_sequence(self, width: int) -> str:
        """Control sequence that clears the recorded output, or '' if none."""
        if self.is_empty:
            return ""
        rows = self.rows(width)
        up = CURSOR_UP.format(rows) if rows else ""
        return f"{up}\r{CLEAR_TO_END}"

    def clear(self) -> None:
        self._chunks.clear()
