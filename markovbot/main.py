"""
Entry point for the Markov Slack bot.

Startup:
1. Parse arguments and configure logging
2. Start the metrics server (if configured)
3. Handshake with rtm.start and open the stream
4. Run the session until the stream fails

Exit status is 1 on handshake or stream failure.
"""

import argparse
import asyncio
import sys

from .config import settings
from .core.bot import Bot
from .observability.logging import configure_logging, get_logger
from .observability.metrics import start_metrics_server
from .protocol.errors import BotError

logger = get_logger(__name__)


def positive_float(value: str) -> float:
    """argparse type for a strictly positive number of seconds."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="markov-slackbot",
        description="Slack bot that replies with Markov-chain text learned from the channel",
    )
    parser.add_argument(
        "--token",
        default=settings.token,
        help="Slack API token (default: $SLACKBOT_TOKEN)",
    )
    parser.add_argument(
        "--ping-interval",
        type=positive_float,
        default=settings.ping_interval_seconds,
        help="Seconds between liveness pings (default: %(default)s)",
    )
    parser.add_argument(
        "--reply-channel",
        default=settings.reply_channel,
        help="Always reply in this channel instead of where mentioned",
    )
    parser.add_argument(
        "--greeting-channel",
        default=settings.greeting_channel,
        help="Channel for the greeting sent on connect",
    )
    parser.add_argument(
        "--no-greeting",
        action="store_true",
        help="Do not send a greeting on connect",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )
    return parser


async def serve(args: argparse.Namespace) -> None:
    """Connect and run the bot until the stream fails."""
    bot = await Bot.connect(
        args.token,
        ping_interval=args.ping_interval,
        reply_channel=args.reply_channel,
        greeting_channel=args.greeting_channel,
        greet_on_connect=False if args.no_greeting else None,
    )
    try:
        await bot.run()
    finally:
        await bot.close()


def run(argv: list[str] | None = None) -> None:
    """Run the bot from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.token:
        parser.error("a Slack token is required (--token or SLACKBOT_TOKEN)")

    configure_logging(args.log_level)

    if settings.metrics_port is not None:
        start_metrics_server(settings.metrics_port)

    try:
        asyncio.run(serve(args))
    except BotError as e:
        logger.error("Bot stopped", code=e.code.value, error=e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        sys.exit(130)


if __name__ == "__main__":
    run()
