"""
Websocket transport for the RTM stream.

Handles the framing side of the protocol:
- JSON text frames out (messages, pings)
- Raw frames in, decoded into InboundEvent by decode_event()
"""

import json
import logging
from typing import Any, Protocol

from pydantic import ValidationError
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import WebSocketException

from ..protocol.errors import MalformedEventError, StreamError
from ..protocol.messages import InboundEvent, MessageType

logger = logging.getLogger(__name__)


class StreamTransport(Protocol):
    """Anything the session can send frames to and receive frames from."""

    async def send(self, payload: dict[str, Any]) -> None: ...

    async def receive(self) -> str | bytes: ...

    async def close(self) -> None: ...


class WebSocketTransport:
    """
    StreamTransport over a websockets client connection.

    Connection-level failures surface as StreamError so callers deal with a
    single fatal error type.
    """

    def __init__(self, ws: ClientConnection):
        self._ws = ws

    @classmethod
    async def open(cls, url: str, origin: str | None = None) -> "WebSocketTransport":
        """
        Open a websocket to the given RTM url.

        Raises:
            StreamError: If the connection cannot be established
        """
        try:
            ws = await connect(url, origin=origin)
        except (OSError, WebSocketException) as e:
            raise StreamError(f"cannot connect to {url}: {e}") from e
        logger.info(f"Connected to {url}")
        return cls(ws)

    async def send(self, payload: dict[str, Any]) -> None:
        """Send one JSON frame."""
        try:
            await self._ws.send(json.dumps(payload))
        except (OSError, WebSocketException) as e:
            raise StreamError(f"send failed: {e}") from e

    async def receive(self) -> str | bytes:
        """Wait for the next raw frame."""
        try:
            return await self._ws.recv()
        except (OSError, WebSocketException) as e:
            raise StreamError(f"receive failed: {e}") from e

    async def close(self) -> None:
        """Close the websocket."""
        await self._ws.close()
        logger.info("WebSocket connection closed")


def decode_event(raw: str | bytes) -> InboundEvent:
    """
    Decode a raw RTM frame into an InboundEvent.

    Non-message events often carry nested payloads (e.g. a channel object)
    that do not fit the flat schema; those decode to a bare event with only
    the type set.

    Raises:
        MalformedEventError: If the frame is not a JSON object or a message
            event does not validate
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedEventError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedEventError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return InboundEvent.model_validate(data)
    except ValidationError as e:
        event_type = data.get("type")
        if isinstance(event_type, str) and event_type != MessageType.MESSAGE.value:
            return InboundEvent(type=event_type)
        raise MalformedEventError(f"{e.error_count()} validation errors") from e
