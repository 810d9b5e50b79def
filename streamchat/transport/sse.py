"""Server-Sent Events transport for the local model server.

The server answers a chat request with lines of the form::

    data: {"chunk": "Hel"}
    data: {"chunk": "lo<|newline|>"}
    data: {"error": "model crashed"}
    event: error
    data: {"error": "model not found"}
    event: done

``event: done`` or an error ends the stream. Newlines inside a
chunk arrive sentinel-encoded; decoding them is the decoder's job.
"""

import json
import logging
from typing import Iterator, Optional

import httpx

from ..config import ChatConfig
from ..errors import TransportError
from ..events import EndOfStream, ErrorSignal, RawEvent, TextEvent
from .base import BaseTransport

_log = logging.getLogger(__name__)

GENERIC_ERROR = "server ended the stream with an error"


def event_name(line: str) -> Optional[str]:
    """Name carried by an ``event:`` line, or None for any other line."""
    if not line.startswith("event:"):
        return None
    return line[len("event:"):].strip()


def _error_message(payload: str) -> str:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        return payload or GENERIC_ERROR
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    return GENERIC_ERROR


def parse_sse_line(line: str, event: Optional[str] = None) -> Optional[RawEvent]:
    """Parse one line of the event stream.

    ``event`` is the name from a preceding ``event:`` line of the same
    event, if any. The ``data:`` line of an ``error`` event supplies the
    error message. Returns None for lines that carry no event (blanks,
    comments, ids, ``event:`` lines other than ``done``).

    Raises:
        TransportError: a ``data:`` payload is not the expected JSON.
    """
    if event_name(line) == "done":
        return EndOfStream()

    if not line.startswith("data:"):
        return None

    payload = line[len("data:"):].strip()
    if event == "error":
        return ErrorSignal(_error_message(payload))
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise TransportError(f"malformed event payload {payload[:60]!r}: {e}") from e
    if not isinstance(data, dict):
        raise TransportError(f"event payload is not an object: {payload[:60]!r}")

    if "error" in data:
        return ErrorSignal(str(data["error"]))
    chunk = data.get("chunk")
    if not isinstance(chunk, str):
        raise TransportError(f"event payload has no text chunk: {payload[:60]!r}")
    return TextEvent(chunk)


def iter_events(lines: Iterator[str]) -> Iterator[RawEvent]:
    """Turn raw stream lines into events, skipping malformed ones.

    Always ends with ``EndOfStream`` or ``ErrorSignal``, even when the
    server closes the connection without saying so. An ``error`` event
    without a data line ends the stream with a generic message.
    """
    pending = None
    for line in lines:
        name = event_name(line)
        if name is not None and name != "done":
            pending = name
            continue
        if not line.strip() and pending is not None:
            if pending == "error":
                yield ErrorSignal(GENERIC_ERROR)
                return
            pending = None
            continue
        current = pending
        if line.startswith("data:"):
            pending = None
        try:
            event = parse_sse_line(line, current)
        except TransportError as e:
            _log.warning("skipping event: %s", e)
            continue
        if event is None:
            continue
        yield event
        if isinstance(event, (EndOfStream, ErrorSignal)):
            return
    if pending == "error":
        yield ErrorSignal(GENERIC_ERROR)
        return
    _log.debug("stream closed without a done event")
    yield EndOfStream()


class SSETransport(BaseTransport):
    """Streams a chat turn from the local model server over HTTP."""

    def __init__(self, config: ChatConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self.client = client or httpx.Client(timeout=config.timeout)

    def _payload(self, message: str) -> dict:
        payload = {
            "message": message,
            "session_id": self.config.session_id,
        }
        if self.config.model:
            payload["model"] = self.config.model
        return payload

    def stream(self, message: str) -> Iterator[RawEvent]:
        url = self.config.stream_url
        headers = {"Accept": "text/event-stream"}
        try:
            with self.client.stream("POST", url, json=self._payload(message), headers=headers) as response:
                response.raise_for_status()
                yield from iter_events(response.iter_lines())
        except httpx.HTTPStatusError as e:
            yield ErrorSignal(f"server returned {e.response.status_code} for {url}")
        except httpx.HTTPError as e:
            yield ErrorSignal(f"could not reach {url}: {e}")

    def close(self) -> None:
        self.client.close()
