"""
RTM session management.

Implements:
- A fixed-cadence ping ticker
- The dispatch loop racing the ticker against the pending receive
- Learning from chat messages and replying when the reply predicate holds
"""

import asyncio
import itertools
import logging
from typing import Callable

from ..api.transport import StreamTransport, decode_event
from ..config import settings
from ..observability.metrics import (
    record_event_received,
    record_generation_failure,
    record_malformed_frame,
    record_message_observed,
    record_ping_sent,
    record_reply_sent,
    update_model_metrics,
)
from ..protocol.errors import GenerationLimitError, MalformedEventError
from ..protocol.messages import InboundEvent, OutboundMessage, Ping
from .markov import TextModel

logger = logging.getLogger(__name__)

ReplyPredicate = Callable[[InboundEvent], bool]


class Ticker:
    """
    Fires at fixed intervals measured from the first wait().

    Deadlines advance by exactly one interval per tick, so a slow handler
    does not shift the schedule. Ticks missed entirely are dropped, not
    delivered in a burst.
    """

    def __init__(self, interval: float):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._deadline: float | None = None

    async def wait(self) -> None:
        """Sleep until the next deadline, then schedule the one after."""
        loop = asyncio.get_running_loop()
        if self._deadline is None:
            self._deadline = loop.time() + self.interval

        delay = self._deadline - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)

        now = loop.time()
        self._deadline += self.interval
        while self._deadline <= now:
            self._deadline += self.interval


class Session:
    """
    The one live RTM stream.

    Features:
    - Pings on a fixed schedule regardless of inbound traffic
    - At most one receive in flight; its result is never dropped
    - Handles each event fully before looking at the next ready source,
      so the text model is only ever touched from this loop
    """

    def __init__(
        self,
        transport: StreamTransport,
        model: TextModel,
        should_reply: ReplyPredicate,
        ping_interval: float | None = None,
        reply_channel: str | None = None,
        ticker: Ticker | None = None,
    ):
        """
        Initialize the session.

        Args:
            transport: Open RTM stream
            model: Text model to learn from and generate with
            should_reply: Decides whether a message event gets a reply
            ping_interval: Seconds between pings (defaults to settings)
            reply_channel: Fixed reply channel; None replies where triggered
            ticker: Ping schedule (built from ping_interval if omitted)
        """
        self.transport = transport
        self.model = model
        self.should_reply = should_reply
        self.reply_channel = reply_channel
        if ping_interval is None:
            ping_interval = settings.ping_interval_seconds
        self.ticker = ticker or Ticker(ping_interval)
        self._ids = itertools.count(1)

    def _next_id(self) -> int:
        return next(self._ids)

    async def run(self) -> None:
        """
        Dispatch loop. Runs until the stream fails.

        Raises:
            StreamError: When a send or receive fails (fatal, no reconnect)
        """
        receive_task: asyncio.Task | None = None
        tick_task: asyncio.Task | None = None
        logger.info(f"Session loop started (ping every {self.ticker.interval}s)")

        try:
            while True:
                if receive_task is None:
                    receive_task = asyncio.create_task(self.transport.receive())
                if tick_task is None:
                    tick_task = asyncio.create_task(self.ticker.wait())

                done, _ = await asyncio.wait(
                    {receive_task, tick_task},
                    return_when=asyncio.FIRST_COMPLETED,
                )

                if tick_task in done:
                    tick_task.result()
                    tick_task = None
                    await self.send_ping()

                if receive_task in done:
                    raw = receive_task.result()
                    receive_task = None
                    await self.handle_frame(raw)
        finally:
            for task in (receive_task, tick_task):
                if task is not None and not task.done():
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        pass
            logger.info("Session loop stopped")

    async def send_ping(self) -> None:
        """Send a liveness ping."""
        ping = Ping(id=self._next_id())
        await self.transport.send(ping.model_dump(mode="json"))
        record_ping_sent()
        logger.debug(f"Ping {ping.id} sent")

    async def send_message(self, channel: str, text: str) -> None:
        """Post a chat message to a channel."""
        message = OutboundMessage(id=self._next_id(), channel=channel, text=text)
        await self.transport.send(message.model_dump(mode="json"))
        logger.info(f"Sent message {message.id} to {channel}")
        logger.debug(f"Message {message.id} text: {text}")

    async def handle_frame(self, raw: str | bytes) -> None:
        """Decode a raw frame and dispatch it; undecodable frames are ignored."""
        try:
            event = decode_event(raw)
        except MalformedEventError as e:
            logger.warning(f"Ignoring frame: {e.message}")
            record_malformed_frame()
            event = InboundEvent()

        await self.handle_event(event)

    async def handle_event(self, event: InboundEvent) -> None:
        """
        React to one inbound event.

        Message events are learned from and may be answered; every other
        event type is only logged.
        """
        record_event_received(event.type)

        if not event.is_message:
            if event.error is not None:
                logger.warning(
                    f"Error event (reply_to={event.reply_to}): "
                    f"{event.error.code} {event.error.message}"
                )
            elif event.type:
                logger.debug(f"Event {event.type} received")
            return

        logger.debug(f"Message in {event.channel} from {event.user}: {event.text}")
        self.model.observe(event.text)
        record_message_observed()
        update_model_metrics(len(self.model), self.model.transitions)

        if self.should_reply(event):
            await self.reply(event.channel)

    async def reply(self, trigger_channel: str, trigger: str = "mention") -> None:
        """
        Generate a message and send it.

        Goes to the fixed reply channel if one is configured, otherwise to
        trigger_channel.
        """
        channel = self.reply_channel or trigger_channel
        if not channel:
            logger.warning("No channel to reply to, skipping reply")
            return

        try:
            text = self.model.generate()
        except GenerationLimitError as e:
            logger.warning(e.message)
            record_generation_failure()
            return

        await self.send_message(channel, text)
        record_reply_sent(trigger)
