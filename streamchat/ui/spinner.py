"""Braille waiting indicator shown until the first fragment arrives."""

import sys
import threading
from typing import TextIO

from .theme import DEFAULT_THEME

_FRAMES = list("⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏")
_INTERVAL = 0.08
_GRACE = 0.5


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class WaitingIndicator:
    """Spinner animated by one daemon thread.

    The thread polls a stop event between frames, so ``stop()`` returns
    within one frame interval; it joins for at most a short grace period.

    Usage:
        indicator = WaitingIndicator()
        indicator.start()
        # ... first fragment arrives ...
        indicator.stop()
    """

    def __init__(
        self,
        label: str = "waiting...",
        stream: TextIO | None = None,
        enabled: bool = True,
    ):
        self._label = label
        self._stream = stream or sys.stderr
        self._enabled = enabled
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        if not self._enabled or self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, name="waiting-indicator", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=_GRACE)
        self._thread = None
        # Clear the spinner line
        self._stream.write(f"\r{' ' * (len(self._label) + 4)}\r")
        self._stream.flush()

    def _spin(self) -> None:
        r, g, b = _hex_to_rgb(DEFAULT_THEME.palette.spinner)
        idx = 0
        while not self._stop.is_set():
            frame = _FRAMES[idx % len(_FRAMES)]
            self._stream.write(f"\r\x1b[38;2;{r};{g};{b}m{frame}\x1b[0m \x1b[2m{self._label}\x1b[0m")
            self._stream.flush()
            idx += 1
            self._stop.wait(_INTERVAL)
