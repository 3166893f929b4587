"""
Slack rtm.start handshake.

Exchanges an API token for the RTM websocket url plus the initial state of
the workspace (our own identity, team, users, channels), then opens the
stream.
"""

import logging
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from ..config import settings
from ..protocol.errors import HandshakeError, StreamError
from ..protocol.messages import (
    AuthenticatedUser,
    Channel,
    RtmStartResponse,
    Team,
    User,
)
from .transport import StreamTransport, WebSocketTransport

logger = logging.getLogger(__name__)


@dataclass
class RtmConnection:
    """An open RTM stream and the workspace state returned by rtm.start."""

    transport: StreamTransport
    identity: AuthenticatedUser
    team: Team = field(default_factory=Team)
    users: list[User] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)


class RtmClient:
    """
    HTTP client for rtm.start.

    Usage:
        async with RtmClient(token) as client:
            connection = await client.connect()
    """

    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        origin: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the handshake client.

        Args:
            token: Slack API token
            api_url: Web API base url (defaults to settings.api_url)
            origin: Origin header for the websocket (defaults to settings.origin)
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._token = token
        self._origin = origin or settings.origin
        self._client = httpx.AsyncClient(
            base_url=(api_url or settings.api_url).rstrip("/"),
            timeout=timeout or settings.http_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "RtmClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def start(self) -> RtmStartResponse:
        """
        Call rtm.start.

        Returns:
            Validated handshake response with ok=True

        Raises:
            HandshakeError: On network, HTTP, decoding or API-level failure
        """
        try:
            response = await self._client.get("/rtm.start", params={"token": self._token})
            response.raise_for_status()
            body = RtmStartResponse.model_validate_json(response.content)
        except httpx.HTTPError as e:
            raise HandshakeError(str(e)) from e
        except ValidationError as e:
            raise HandshakeError(f"unexpected rtm.start response: {e.error_count()} errors") from e

        if not body.ok:
            raise HandshakeError(body.error or "rtm.start returned ok=false")
        if not body.url or body.self_user is None:
            raise HandshakeError("rtm.start response has no stream url or identity")

        logger.info(
            f"rtm.start ok: team={body.team.name or body.team.id} "
            f"self={body.self_user.name} ({body.self_user.id}), "
            f"{len(body.users)} users, {len(body.channels)} channels"
        )
        return body

    async def connect(self) -> RtmConnection:
        """
        Perform the handshake and open the RTM stream.

        Raises:
            HandshakeError: If rtm.start fails or the websocket cannot be opened
        """
        body = await self.start()
        try:
            transport = await WebSocketTransport.open(body.url, origin=self._origin)
        except StreamError as e:
            raise HandshakeError(e.message) from e

        return RtmConnection(
            transport=transport,
            identity=body.self_user,
            team=body.team,
            users=body.users,
            channels=body.channels,
        )
