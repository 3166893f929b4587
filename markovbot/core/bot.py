"""The bot: identity, text model and session wired together."""

import logging
import random

from ..api.rtm import RtmClient, RtmConnection
from ..config import settings
from ..protocol.messages import InboundEvent
from .markov import TextModel
from .session import Session

logger = logging.getLogger(__name__)


def mentions(text: str, user_id: str) -> bool:
    """Check whether text contains a <@user_id> mention."""
    return f"<@{user_id}>" in text


class Bot:
    """
    A connected bot.

    Owns the text model; the session is the only thing that mutates it.

    Usage:
        bot = await Bot.connect(token)
        try:
            await bot.run()
        finally:
            await bot.close()
    """

    def __init__(
        self,
        connection: RtmConnection,
        model: TextModel | None = None,
        ping_interval: float | None = None,
        reply_channel: str | None = None,
        greeting_channel: str | None = None,
        greet_on_connect: bool | None = None,
        ignore_own_messages: bool | None = None,
    ):
        """
        Initialize the bot on an open connection.

        Unset arguments fall back to settings.
        """
        self.connection = connection
        self.identity = connection.identity
        self.model = model or TextModel(
            rng=random.Random(settings.random_seed),
            max_steps=settings.max_generation_steps,
        )
        self.greeting_channel = greeting_channel or settings.greeting_channel
        self.greet_on_connect = (
            settings.greet_on_connect if greet_on_connect is None else greet_on_connect
        )
        self.ignore_own_messages = (
            settings.ignore_own_messages if ignore_own_messages is None else ignore_own_messages
        )
        self.session = Session(
            transport=connection.transport,
            model=self.model,
            should_reply=self.should_reply,
            ping_interval=ping_interval,
            reply_channel=reply_channel or settings.reply_channel,
        )

    @classmethod
    async def connect(cls, token: str, **kwargs) -> "Bot":
        """
        Handshake with Slack and build a bot on the resulting stream.

        Raises:
            HandshakeError: If the handshake or stream setup fails
        """
        async with RtmClient(token) as client:
            connection = await client.connect()
        try:
            return cls(connection, **kwargs)
        except Exception:
            await connection.transport.close()
            raise

    def should_reply(self, event: InboundEvent) -> bool:
        """Reply when mentioned, unless the message is our own."""
        if self.ignore_own_messages and event.user == self.identity.id:
            return False
        return mentions(event.text, self.identity.id)

    async def greet(self) -> None:
        """Post one generated message to the greeting channel."""
        if not self.greeting_channel:
            logger.debug("No greeting channel configured, skipping greeting")
            return
        await self.session.reply(self.greeting_channel, trigger="greeting")

    async def run(self) -> None:
        """
        Greet (if enabled) and run the session until the stream fails.

        Raises:
            StreamError: When the stream fails
        """
        logger.info(f"Running as {self.identity.name} ({self.identity.id})")
        if self.greet_on_connect:
            await self.greet()
        await self.session.run()

    async def close(self) -> None:
        """Close the stream."""
        await self.connection.transport.close()
