"""
Tests for the rtm.start handshake.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from markovbot.api.rtm import RtmClient
from markovbot.protocol.errors import HandshakeError, StreamError

from .conftest import FakeTransport

RTM_START_OK = {
    "ok": True,
    "url": "wss://rtm.example/websocket/abc",
    "self": {"id": "UBOT", "name": "markov", "created": 1445000000, "manual_presence": "active"},
    "team": {"id": "T1", "name": "Acme", "email_domain": "acme.test", "plan": "std"},
    "users": [
        {"id": "UBOT", "name": "markov", "profile": {"real_name": "Markov Bot"}},
        {"id": "U2", "name": "alice", "is_admin": True, "has_2fa": True},
    ],
    "channels": [
        {
            "id": "C1",
            "name": "general",
            "is_general": True,
            "members": ["UBOT", "U2"],
            "topic": {"value": "chat", "creator": "U2", "last_set": 0},
            "latest": {"type": "message", "text": "hi"},
        },
    ],
}


def make_client(handler) -> RtmClient:
    """RtmClient whose HTTP calls go to handler."""
    return RtmClient(
        "xoxb-test",
        api_url="https://slack.test/api",
        origin="https://slack.test",
        transport=httpx.MockTransport(handler),
    )


class TestStart:
    """Tests for RtmClient.start."""

    @pytest.mark.asyncio
    async def test_success(self):
        """Should call rtm.start with the token and parse the roster."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=RTM_START_OK)

        async with make_client(handler) as client:
            body = await client.start()

        assert seen[0].url.path == "/api/rtm.start"
        assert seen[0].url.params["token"] == "xoxb-test"
        assert body.url == "wss://rtm.example/websocket/abc"
        assert body.self_user.id == "UBOT"
        assert body.team.name == "Acme"
        assert [u.name for u in body.users] == ["markov", "alice"]
        assert body.users[0].profile.real_name == "Markov Bot"
        assert body.channels[0].is_general
        assert body.channels[0].members == ["UBOT", "U2"]

    @pytest.mark.asyncio
    async def test_api_error(self):
        """ok=false should raise with Slack's error string."""
        def handler(request):
            return httpx.Response(200, json={"ok": False, "error": "invalid_auth"})

        async with make_client(handler) as client:
            with pytest.raises(HandshakeError, match="invalid_auth") as exc_info:
                await client.start()

        assert exc_info.value.code.value == "HANDSHAKE_FAILED"

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Non-2xx responses should raise HandshakeError."""
        def handler(request):
            return httpx.Response(503, text="unavailable")

        async with make_client(handler) as client:
            with pytest.raises(HandshakeError):
                await client.start()

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Connection failures should raise HandshakeError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(HandshakeError, match="connection refused"):
                await client.start()

    @pytest.mark.asyncio
    async def test_invalid_body(self):
        """A body that is not the expected JSON should raise HandshakeError."""
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        async with make_client(handler) as client:
            with pytest.raises(HandshakeError, match="unexpected"):
                await client.start()

    @pytest.mark.asyncio
    async def test_missing_url(self):
        """ok=true without a stream url is still a failure."""
        def handler(request):
            return httpx.Response(200, json={"ok": True, "self": {"id": "UBOT"}})

        async with make_client(handler) as client:
            with pytest.raises(HandshakeError, match="no stream url"):
                await client.start()


class TestConnect:
    """Tests for RtmClient.connect."""

    @pytest.mark.asyncio
    async def test_opens_stream(self):
        """Should open the websocket at the returned url with the origin."""
        fake = FakeTransport()

        def handler(request):
            return httpx.Response(200, json=RTM_START_OK)

        with patch(
            "markovbot.api.rtm.WebSocketTransport.open", AsyncMock(return_value=fake)
        ) as open_stream:
            async with make_client(handler) as client:
                connection = await client.connect()

        open_stream.assert_awaited_once_with(
            "wss://rtm.example/websocket/abc", origin="https://slack.test"
        )
        assert connection.transport is fake
        assert connection.identity.id == "UBOT"
        assert connection.team.id == "T1"
        assert len(connection.users) == 2
        assert connection.channels[0].name == "general"

    @pytest.mark.asyncio
    async def test_stream_failure(self):
        """A websocket that cannot be opened is a handshake failure."""
        def handler(request):
            return httpx.Response(200, json=RTM_START_OK)

        with patch(
            "markovbot.api.rtm.WebSocketTransport.open",
            AsyncMock(side_effect=StreamError("cannot connect")),
        ):
            async with make_client(handler) as client:
                with pytest.raises(HandshakeError, match="cannot connect"):
                    await client.connect()
