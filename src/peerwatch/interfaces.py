"""Protocols for the collaborators a keepalive session depends on.

The session never owns its transport, its timers or its connection. It is
handed objects satisfying these protocols:

- Channel: sends messages to the remote peer
- Scheduler: runs a callback once after a delay
- Manager: owns the connection and is told when the peer goes silent
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from peerwatch.keepalive.session import KeepAliveSession


@runtime_checkable
class Channel(Protocol):
    """Outbound side of a reliable, ordered, bidirectional channel."""

    def send(self, message: Any) -> None:
        """Send a message to the remote peer.

        Raises:
            ChannelUnavailableError: If the channel has gone away.
        """
        ...


@runtime_checkable
class Registration(Protocol):
    """Handle for a callback registered with a Scheduler."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not started yet."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Fire-once delayed callback registration."""

    def after(self, delay: float, callback: Callable[[], None]) -> Registration:
        """Run ``callback`` once, ``delay`` seconds from now.

        Args:
            delay: Seconds to wait before invoking the callback.
            callback: Zero-argument callable.

        Returns:
            Registration that can cancel the pending call.
        """
        ...


@runtime_checkable
class Manager(Protocol):
    """Owner of the connection the session watches."""

    def notify_peer_timeout(self, session: "KeepAliveSession") -> None:
        """Called exactly once when the session decides the peer is gone."""
        ...
