"""In-memory channel pair.

Two ``LoopbackChannel`` ends deliver messages to each other synchronously, on
the sender's thread. Useful for simulations and tests where no real transport
is wanted.
"""

import threading
from collections.abc import Callable
from typing import Any

from peerwatch.exceptions import ChannelUnavailableError
from peerwatch.logging import get_logger

LOG = get_logger(__name__)

Receiver = Callable[[Any], None]


class LoopbackChannel:
    """One end of an in-memory bidirectional channel.

    Attributes:
        name: Name used in log events.
        drop_outbound: When True, sends succeed but nothing is delivered,
            which looks like a silently dead peer from the other end.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.drop_outbound = False
        self._peer: LoopbackChannel | None = None
        self._receiver: Receiver | None = None
        self._closed = False
        self._lock = threading.Lock()

    @classmethod
    def pair(
        cls, names: tuple[str, str] = ("client", "server")
    ) -> tuple["LoopbackChannel", "LoopbackChannel"]:
        """Create two connected channel ends."""
        first, second = cls(names[0]), cls(names[1])
        first._peer, second._peer = second, first
        return first, second

    def attach(self, receiver: Receiver) -> None:
        """Set the callable that receives messages arriving at this end."""
        self._receiver = receiver

    @property
    def closed(self) -> bool:
        """True once either end has been closed."""
        with self._lock:
            closed = self._closed
        return closed or (self._peer is not None and self._peer._closed)

    def close(self) -> None:
        """Close this end. Later sends from either end fail."""
        with self._lock:
            self._closed = True
        LOG.debug("channel_closed", channel=self.name)

    def send(self, message: Any) -> None:
        """Deliver ``message`` to the other end.

        Raises:
            ChannelUnavailableError: If either end is closed or unconnected.
        """
        if self._peer is None or self.closed:
            raise ChannelUnavailableError(f"Channel {self.name!r} is unavailable")
        if self.drop_outbound:
            LOG.debug("message_dropped", channel=self.name, message=type(message).__name__)
            return
        self._peer._deliver(message)

    def _deliver(self, message: Any) -> None:
        receiver = self._receiver
        if receiver is None:
            LOG.debug("message_unhandled", channel=self.name, message=type(message).__name__)
            return
        receiver(message)
