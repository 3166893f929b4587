"""Configuration settings for the Slack bot using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SLACKBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Credentials
    token: str | None = Field(
        default=None,
        description="Slack API token used for rtm.start",
    )

    # Slack endpoints
    api_url: str = Field(
        default="https://slack.com/api",
        description="Base URL of the Slack Web API",
    )
    origin: str = Field(
        default="https://slack.com",
        description="Origin header sent when opening the RTM websocket",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for the rtm.start handshake request",
    )

    # Session
    ping_interval_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Interval between liveness pings on the RTM stream",
    )
    reply_channel: str | None = Field(
        default=None,
        description="Fixed channel for replies (default: reply where mentioned)",
    )
    greet_on_connect: bool = Field(
        default=True,
        description="Send one generated message right after connecting",
    )
    greeting_channel: str | None = Field(
        default=None,
        description="Channel for the connect greeting (skipped when unset)",
    )
    ignore_own_messages: bool = Field(
        default=True,
        description="Never reply to messages the bot posted itself",
    )

    # Text model
    max_generation_steps: int | None = Field(
        default=None,
        ge=1,
        description="Abort generation after this many steps (unbounded if unset)",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for reproducible generation",
    )

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    metrics_port: int | None = Field(
        default=None,
        description="Port for the Prometheus metrics server (disabled if unset)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export a default instance for convenience
settings = get_settings()
