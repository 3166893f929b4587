"""
Pytest fixtures for the Slack bot tests.
"""

import asyncio
import json
import random
from typing import Any

import pytest

from markovbot.api.rtm import RtmConnection
from markovbot.core.markov import TextModel
from markovbot.protocol.messages import AuthenticatedUser

BOT_ID = "UBOT"


class FakeTransport:
    """In-memory StreamTransport fed from a queue."""

    def __init__(self):
        self.frames: asyncio.Queue = asyncio.Queue()
        self.sent: list[dict[str, Any]] = []
        self.receive_calls = 0
        self.closed = False

    def push(self, frame: Any) -> None:
        """Queue a raw frame, a dict (sent as JSON) or an exception to raise."""
        if isinstance(frame, dict):
            frame = json.dumps(frame)
        self.frames.put_nowait(frame)

    async def send(self, payload: dict[str, Any]) -> None:
        self.sent.append(payload)

    async def receive(self) -> str | bytes:
        self.receive_calls += 1
        item = await self.frames.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True

    def sent_of_type(self, frame_type: str) -> list[dict[str, Any]]:
        return [p for p in self.sent if p["type"] == frame_type]


class FakeTicker:
    """Ticker that fires only when told to."""

    interval = 20.0

    def __init__(self):
        self._ticks: asyncio.Queue = asyncio.Queue()

    def fire(self) -> None:
        self._ticks.put_nowait(None)

    async def wait(self) -> None:
        await self._ticks.get()


async def wait_until(predicate, timeout: float = 1.0) -> None:
    """Yield to the loop until predicate() is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


def message_event(text: str, channel: str = "C1", user: str = "UHUMAN") -> dict[str, Any]:
    """Build a wire-format message event."""
    return {
        "type": "message",
        "text": text,
        "channel": channel,
        "user": user,
        "ts": "1445000000.000001",
    }


@pytest.fixture
def transport():
    """Fake RTM stream."""
    return FakeTransport()


@pytest.fixture
def ticker():
    """Manually fired ping ticker."""
    return FakeTicker()


@pytest.fixture
def model():
    """Text model with a fixed seed."""
    return TextModel(rng=random.Random(1234))


@pytest.fixture
def identity():
    """The bot's own identity."""
    return AuthenticatedUser(id=BOT_ID, name="markov")


@pytest.fixture
def connection(transport, identity):
    """Open connection over the fake transport."""
    return RtmConnection(transport=transport, identity=identity)
