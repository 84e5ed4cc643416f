"""Keepalive session state.

The mutable ``SessionState`` is private to a session and only touched under
the session lock. ``SessionSnapshot`` is the immutable copy handed out for
diagnostics.
"""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class SessionStatus(StrEnum):
    """Lifecycle of a keepalive session.

    NOT_STARTED -> RUNNING -> STOPPED, with STOPPED terminal.
    """

    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class StopReason(StrEnum):
    """Why a session left the RUNNING state."""

    PEER_TIMEOUT = "peer_timeout"
    CHANNEL_UNAVAILABLE = "channel_unavailable"
    SCHEDULER_UNAVAILABLE = "scheduler_unavailable"
    STOPPED = "stopped"


@dataclass
class SessionState:
    """Timestamps and counters of a session.

    Timestamps come from the session's monotonic clock. Each watched
    timestamp is set to the start time when the session starts.
    """

    started_at: float | None = None
    stopped_at: float | None = None
    last_probe_sent_at: float | None = None
    last_ack_received_at: float | None = None
    last_probe_received_at: float | None = None
    probes_sent: int = 0
    probes_received: int = 0
    acks_sent: int = 0
    acks_received: int = 0


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time view of a session.

    Attributes:
        name: Session name used in logs.
        role: "client", "server", or None before start.
        status: Current SessionStatus.
        stop_reason: Why the session stopped, if it has.
        interval: Seconds between wake-ups.
        threshold: Seconds of silence tolerated before a timeout.
        state: Copy of the session's timestamps and counters.
    """

    name: str
    role: str | None
    status: SessionStatus
    stop_reason: StopReason | None
    interval: float
    threshold: float
    state: SessionState

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
