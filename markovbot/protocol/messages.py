"""Pydantic models for the Slack RTM protocol and the rtm.start handshake."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================


class MessageType(str, Enum):
    """Frame types the bot sends or reacts to on the RTM stream."""

    MESSAGE = "message"
    PING = "ping"
    PONG = "pong"
    HELLO = "hello"


class ErrorCode(str, Enum):
    """Error codes carried by bot exceptions."""

    HANDSHAKE_FAILED = "HANDSHAKE_FAILED"
    STREAM_CLOSED = "STREAM_CLOSED"
    MALFORMED_EVENT = "MALFORMED_EVENT"
    GENERATION_LIMIT = "GENERATION_LIMIT"


# =============================================================================
# Client -> Server frames
# =============================================================================


class OutboundMessage(BaseModel):
    """A chat message posted to a channel."""

    id: int = Field(..., description="Client sequence id")
    type: Literal[MessageType.MESSAGE] = MessageType.MESSAGE
    channel: str = Field(..., min_length=1, description="Target channel id")
    text: str = Field(..., min_length=1, description="Message text")


class Ping(BaseModel):
    """Liveness signal keeping the RTM stream open."""

    id: int = Field(..., description="Client sequence id")
    type: Literal[MessageType.PING] = MessageType.PING


# =============================================================================
# Server -> Client frames
# =============================================================================


class EventError(BaseModel):
    """Error attached to a failed reply frame."""

    model_config = ConfigDict(populate_by_name=True)

    code: int = 0
    message: str = Field(default="", alias="msg")


class InboundEvent(BaseModel):
    """
    An event received on the RTM stream.

    Every field is optional on the wire; an event with no fields is the
    empty event used in place of frames that fail to decode.
    """

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = False
    type: str = ""
    error: EventError | None = None
    timestamp: str = Field(default="", alias="ts")
    text: str = ""
    channel: str = ""
    user: str = ""
    subtype: str | None = None
    reply_to: int | None = None

    @property
    def is_message(self) -> bool:
        """Whether this event is a chat message."""
        return self.type == MessageType.MESSAGE.value


# =============================================================================
# rtm.start handshake
# =============================================================================


class AuthenticatedUser(BaseModel):
    """The identity the token authenticated as."""

    id: str = Field(..., description="User id, as used in <@ID> mentions")
    name: str = Field(default="", description="Display name")
    created: int = 0
    manual_presence: str = ""


class Team(BaseModel):
    """Workspace information."""

    id: str = ""
    name: str = ""
    email_domain: str = ""
    msg_edit_window_mins: int = 0
    over_storage_limit: bool = False
    plan: str = ""


class UserProfile(BaseModel):
    """Profile data of a workspace member."""

    first_name: str = ""
    last_name: str = ""
    real_name: str = ""
    email: str = ""
    skype: str = ""
    phone: str = ""
    image_24: str = ""
    image_32: str = ""
    image_48: str = ""
    image_72: str = ""
    image_192: str = ""


class User(BaseModel):
    """A workspace member or bot."""

    id: str
    name: str = ""
    deleted: bool = False
    color: str = ""
    profile: UserProfile = Field(default_factory=UserProfile)
    is_admin: bool = False
    is_owner: bool = False
    is_primary_owner: bool = False
    is_restricted: bool = False
    is_ultra_restricted: bool = False
    has_2fa: bool = False
    has_files: bool = False


class ChannelTopic(BaseModel):
    """Topic or purpose of a channel."""

    value: str = ""
    creator: str = ""
    last_set: int = 0


class Channel(BaseModel):
    """A channel known to the workspace."""

    id: str
    name: str = ""
    is_channel: bool = False
    created: int = 0
    creator: str = ""
    is_archived: bool = False
    is_general: bool = False
    members: list[str] = Field(default_factory=list)
    topic: ChannelTopic = Field(default_factory=ChannelTopic)
    purpose: ChannelTopic = Field(default_factory=ChannelTopic)
    is_member: bool = False
    last_read: str = ""
    latest: Any = None
    unread_count: int = 0
    unread_count_display: int = 0


class RtmStartResponse(BaseModel):
    """Response body of rtm.start."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = False
    error: str | None = None
    url: str = ""
    self_user: AuthenticatedUser | None = Field(default=None, alias="self")
    team: Team = Field(default_factory=Team)
    users: list[User] = Field(default_factory=list)
    channels: list[Channel] = Field(default_factory=list)
