"""One chat turn: stream, render live, erase, redraw, log."""

import logging
from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from .config import ChatConfig
from .decoder import StreamDecoder
from .errors import StreamError
from .events import EndOfStream, TextEvent
from .history import HistoryLog
from .transport.base import BaseTransport
from .ui.output import render_error
from .ui.size import TerminalSize
from .ui.spinner import WaitingIndicator
from .ui.stream import TerminalRenderer

_log = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Outcome of one turn. ``text`` is the raw, sentinel-encoded response."""

    text: str = ""
    error: Optional[str] = None
    fragments: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SessionStats:
    turns: int = 0
    failed: int = 0
    fragments: int = 0


class ChatSession:
    """A chat session against one transport.

    Usage:
        session = ChatSession(config, SSETransport(config), console)
        result = session.run_turn("hello")
    """

    def __init__(
        self,
        config: ChatConfig,
        transport: BaseTransport,
        console: Console,
        history: Optional[HistoryLog] = None,
        size: Optional[TerminalSize] = None,
        indicator: Optional[WaitingIndicator] = None,
    ):
        self.config = config
        self.transport = transport
        self.console = console
        self.history = history if history is not None else HistoryLog(config.history_path, config.newline_token)
        self.renderer = TerminalRenderer(console, size=size, newline_token=config.newline_token)
        self._indicator = indicator or WaitingIndicator(enabled=config.spinner)
        self.stats = SessionStats()

    def run_turn(self, message: str) -> TurnResult:
        """Send *message* and render the response.

        A server error aborts the turn: it is reported, the provisional
        output stays on screen, and no final render happens.
        """
        decoder = StreamDecoder(self.config.newline_token)
        result = TurnResult()
        raw_parts: list[str] = []

        self._indicator.start()
        try:
            for event in self.transport.stream(message):
                if isinstance(event, TextEvent):
                    self._indicator.stop()
                    raw_parts.append(event.fragment)
                    result.fragments += 1
                for segment in decoder.feed(event):
                    self.renderer.render_incremental(segment)
                if isinstance(event, EndOfStream):
                    break
            else:
                for segment in decoder.finish():
                    self.renderer.render_incremental(segment)
        except StreamError as e:
            self._indicator.stop()
            self.renderer.abort()
            result.error = e.message
            render_error(e.message, self.console)
            _log.info("turn aborted by server error: %s", e.message)
            self.history.append_turn(message, None)
            self._record(result)
            return result
        except KeyboardInterrupt:
            self.renderer.abort()
            raise
        finally:
            self._indicator.stop()

        result.text = "".join(raw_parts)
        self.renderer.erase_incremental_output()
        self.renderer.render_final(result.text)
        self.history.append_turn(message, result.text)
        self._record(result)
        return result

    def replay(self, raw_response: str) -> None:
        """Final-render a response read back from the history log."""
        self.renderer.draw(raw_response)

    def _record(self, result: TurnResult) -> None:
        self.stats.turns += 1
        self.stats.fragments += result.fragments
        if not result.ok:
            self.stats.failed += 1

    def close(self) -> None:
        self._indicator.stop()
        self.transport.close()
