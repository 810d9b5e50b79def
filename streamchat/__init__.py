"""streamchat - terminal chat client for a local model server."""

__version__ = "0.1.0"

from .config import ChatConfig, ConfigManager
from .decoder import StreamDecoder, decode_text
from .errors import RenderStateError, StreamChatError, StreamError, TransportError
from .chat import ChatSession, TurnResult
from .ui.stream import TerminalRenderer

__all__ = [
    "ChatConfig",
    "ConfigManager",
    "StreamDecoder",
    "decode_text",
    "RenderStateError",
    "StreamChatError",
    "StreamError",
    "TransportError",
    "ChatSession",
    "TurnResult",
    "TerminalRenderer",
]
