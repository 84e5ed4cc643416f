"""Reference connection manager.

Owns one channel and the keepalive session watching it. When the session
reports a dead peer the manager closes the channel; reconnecting is left to
whoever owns the manager.
"""

import threading
from typing import Any, Protocol, runtime_checkable

from peerwatch.interfaces import Channel, Scheduler
from peerwatch.keepalive.roles import Role
from peerwatch.keepalive.session import KeepAliveSession
from peerwatch.logging import get_logger

LOG = get_logger(__name__)


@runtime_checkable
class ClosableChannel(Channel, Protocol):
    """A channel the manager can tear down."""

    def close(self) -> None: ...


class ConnectionManager:
    """Manage a single connection and its keepalive session.

    Example:
        >>> client_end, server_end = LoopbackChannel.pair()
        >>> manager = ConnectionManager(client_end, scheduler, name="client")
        >>> client_end.attach(manager.receive)
        >>> manager.start(Role.CLIENT)
        >>> manager.wait_for_timeout(60)
    """

    def __init__(
        self,
        channel: ClosableChannel,
        scheduler: Scheduler,
        *,
        name: str = "connection",
        **session_options: Any,
    ) -> None:
        """Initialize manager and its (not yet started) session.

        Args:
            channel: Channel owned by this connection.
            scheduler: Scheduler driving the session's wake-ups.
            name: Connection name, also used as the session name.
            **session_options: Passed to KeepAliveSession (interval, tolerance, clock).
        """
        self.name = name
        self.channel = channel
        self.session = KeepAliveSession(channel, scheduler, self, name=name, **session_options)
        self.timeouts = 0
        self._timed_out = threading.Event()

    def start(self, role: Role) -> None:
        """Start the keepalive session in the given role."""
        if role is Role.CLIENT:
            self.session.start_as_client()
        else:
            self.session.start_as_server()

    def receive(self, message: Any) -> None:
        """Hand an inbound keepalive message to the session."""
        self.session.receive(message)

    def notify_peer_timeout(self, session: KeepAliveSession) -> None:
        """Tear down the connection after the session gave up on the peer."""
        if session is not self.session:
            LOG.warning("foreign_session_timeout", connection=self.name, session=session.name)
            return
        self.timeouts += 1
        LOG.error("connection_timed_out", connection=self.name, reason=session.stop_reason)
        self.channel.close()
        self._timed_out.set()

    @property
    def timed_out(self) -> bool:
        return self._timed_out.is_set()

    def wait_for_timeout(self, timeout: float | None = None) -> bool:
        """Block until the peer times out or ``timeout`` seconds pass.

        Returns:
            True if the peer timed out.
        """
        return self._timed_out.wait(timeout)

    def close(self) -> None:
        """Close the connection without waiting for a timeout."""
        if self.session.running:
            self.session.stop()
        self.channel.close()
