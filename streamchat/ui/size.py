"""Terminal width capability.

The renderer asks for the width at the moment it needs it, never caches it:
erasing must use the width at erase time, which differs from the width at
write time if the window was resized mid-stream.
"""

from abc import ABC, abstractmethod

from rich.console import Console


class TerminalSize(ABC):
    """Source of the current terminal width in cells."""

    @abstractmethod
    def columns(self) -> int:
        pass


class ConsoleSize(TerminalSize):
    """Live width of a Rich console."""

    def __init__(self, console: Console):
        self._console = console

    def columns(self) -> int:
        return self._console.size.width or 80


class FixedSize(TerminalSize):
    """Constant width, for tests and non-interactive output."""

    def __init__(self, columns: int = 80):
        if columns < 1:
            raise ValueError(f"terminal width must be positive, got {columns}")
        self._columns = columns

    def columns(self) -> int:
        return self._columns
