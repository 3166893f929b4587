"""Custom exceptions for the Slack bot."""

from .messages import ErrorCode


class BotError(Exception):
    """Base exception for bot errors."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class HandshakeError(BotError):
    """Raised when rtm.start fails or the stream cannot be opened."""

    def __init__(self, message: str):
        super().__init__(
            ErrorCode.HANDSHAKE_FAILED,
            f"Handshake failed: {message}",
        )


class StreamError(BotError):
    """Raised when reading from or writing to the RTM stream fails."""

    def __init__(self, message: str):
        super().__init__(
            ErrorCode.STREAM_CLOSED,
            f"Stream error: {message}",
        )


class MalformedEventError(BotError):
    """Raised when an inbound frame cannot be decoded."""

    def __init__(self, message: str):
        super().__init__(
            ErrorCode.MALFORMED_EVENT,
            f"Malformed event: {message}",
        )


class GenerationLimitError(BotError):
    """Raised when generation exceeds its step bound without ending."""

    def __init__(self, max_steps: int):
        super().__init__(
            ErrorCode.GENERATION_LIMIT,
            f"Generation exceeded {max_steps} steps without reaching end of message",
        )
        self.max_steps = max_steps
