"""Exception types for streamchat.

Every error is scoped to a single chat turn; none of them ends the session.
"""


class StreamChatError(Exception):
    """Base class for streamchat errors."""


class TransportError(StreamChatError):
    """A single transport event could not be parsed.

    The event is skipped and the stream continues.
    """


class StreamError(StreamChatError):
    """The server signalled an error. The current turn is aborted."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RenderStateError(StreamChatError):
    """A renderer operation was called out of turn order."""
