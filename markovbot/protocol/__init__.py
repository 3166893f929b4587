"""Wire schemas and error types."""

from .errors import (
    BotError,
    GenerationLimitError,
    HandshakeError,
    MalformedEventError,
    StreamError,
)
from .messages import (
    ErrorCode,
    InboundEvent,
    MessageType,
    OutboundMessage,
    Ping,
    RtmStartResponse,
)

__all__ = [
    "BotError",
    "ErrorCode",
    "GenerationLimitError",
    "HandshakeError",
    "InboundEvent",
    "MalformedEventError",
    "MessageType",
    "OutboundMessage",
    "Ping",
    "RtmStartResponse",
    "StreamError",
]
