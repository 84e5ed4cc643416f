"""Role strategies for the keepalive session.

Client and server share one wake-up handler. What differs is the timestamp
each role watches and what it does on a wake-up that did not time out.
"""

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from peerwatch.keepalive.state import SessionState

if TYPE_CHECKING:
    from peerwatch.keepalive.session import KeepAliveSession


class Role(StrEnum):
    """Side of the connection a session plays."""

    CLIENT = "client"
    SERVER = "server"


class RoleStrategy(Protocol):
    """Role-specific behaviour plugged into the session."""

    role: Role

    def reset_baseline(self, state: SessionState, now: float) -> None:
        """Initialise the watched timestamp at session start."""
        ...

    def watched_timestamp(self, state: SessionState) -> float:
        """Time of the last sign of life from the peer."""
        ...

    def on_start(self, session: "KeepAliveSession") -> None:
        """Action taken once, right after the session starts."""
        ...

    def on_wakeup(self, session: "KeepAliveSession") -> None:
        """Action taken on every wake-up that did not time out."""
        ...


class ClientRole:
    """Sends a probe every interval and watches for acks."""

    role = Role.CLIENT

    def reset_baseline(self, state: SessionState, now: float) -> None:
        state.last_ack_received_at = now

    def watched_timestamp(self, state: SessionState) -> float:
        assert state.last_ack_received_at is not None
        return state.last_ack_received_at

    def on_start(self, session: "KeepAliveSession") -> None:
        session._send_probe()

    def on_wakeup(self, session: "KeepAliveSession") -> None:
        session._send_probe()


class ServerRole:
    """Answers probes and watches for them; never probes on its own."""

    role = Role.SERVER

    def reset_baseline(self, state: SessionState, now: float) -> None:
        state.last_probe_received_at = now

    def watched_timestamp(self, state: SessionState) -> float:
        assert state.last_probe_received_at is not None
        return state.last_probe_received_at

    def on_start(self, session: "KeepAliveSession") -> None:
        pass

    def on_wakeup(self, session: "KeepAliveSession") -> None:
        pass


def strategy_for(role: Role) -> RoleStrategy:
    """Return the strategy implementing ``role``."""
    if role is Role.CLIENT:
        return ClientRole()
    return ServerRole()
