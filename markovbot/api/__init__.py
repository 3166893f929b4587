"""Slack-facing collaborators: handshake and stream transport."""

from .rtm import RtmClient, RtmConnection
from .transport import StreamTransport, WebSocketTransport, decode_event

__all__ = [
    "RtmClient",
    "RtmConnection",
    "StreamTransport",
    "WebSocketTransport",
    "decode_event",
]
