"""
Prometheus metrics for the Slack bot.

Exports:
- Inbound events by type and malformed frames
- Observed messages, replies, pings
- Transition table size
"""

import logging

from prometheus_client import Counter, Gauge, start_http_server

logger = logging.getLogger(__name__)

# =============================================================================
# Stream metrics
# =============================================================================

slackbot_events_received = Counter(
    "slackbot_events_received_total",
    "Events received on the RTM stream",
    ["type"],
)

slackbot_malformed_frames = Counter(
    "slackbot_malformed_frames_total",
    "Inbound frames that failed to decode",
)

slackbot_pings_sent = Counter(
    "slackbot_pings_sent_total",
    "Liveness pings sent",
)

# =============================================================================
# Text model metrics
# =============================================================================

slackbot_messages_observed = Counter(
    "slackbot_messages_observed_total",
    "Chat messages fed to the text model",
)

slackbot_replies_sent = Counter(
    "slackbot_replies_sent_total",
    "Generated messages sent",
    ["trigger"],  # mention, greeting
)

slackbot_generation_failures = Counter(
    "slackbot_generation_failures_total",
    "Generations aborted by the step bound",
)

slackbot_transition_tokens = Gauge(
    "slackbot_transition_tokens",
    "Distinct tokens in the transition table",
)

slackbot_transition_edges = Gauge(
    "slackbot_transition_edges",
    "Recorded transitions in the transition table",
)


# =============================================================================
# Helper functions
# =============================================================================


def record_event_received(event_type: str) -> None:
    """Record an inbound event; untyped frames are labelled 'none'."""
    slackbot_events_received.labels(type=event_type or "none").inc()


def record_malformed_frame() -> None:
    """Record a frame that could not be decoded."""
    slackbot_malformed_frames.inc()


def record_ping_sent() -> None:
    """Record a liveness ping."""
    slackbot_pings_sent.inc()


def record_message_observed() -> None:
    """Record a message fed to the text model."""
    slackbot_messages_observed.inc()


def record_reply_sent(trigger: str) -> None:
    """Record a generated message being sent."""
    slackbot_replies_sent.labels(trigger=trigger).inc()


def record_generation_failure() -> None:
    """Record a generation aborted by the step bound."""
    slackbot_generation_failures.inc()


def update_model_metrics(tokens: int, edges: int) -> None:
    """Update transition table gauges."""
    slackbot_transition_tokens.set(tokens)
    slackbot_transition_edges.set(edges)


def start_metrics_server(port: int) -> None:
    """Expose metrics for Prometheus scraping on the given port."""
    start_http_server(port)
    logger.info(f"Metrics server listening on :{port}")
