"""peerwatch - KeepAlive liveness detection between two peers.

A client and a server exchange probes and acks over a shared channel. Each
side wakes up at a fixed interval and tells its connection manager, exactly
once, when the other side has gone silent for too long.

This package provides:
- KeepAliveSession, the role-polymorphic liveness state machine
- ThreadingScheduler for running wake-ups on timer threads
- LoopbackChannel and ConnectionManager for in-process wiring
- Settings and structured logging shared by all of the above

Example:
    >>> from peerwatch import ConnectionManager, LoopbackChannel, Role, ThreadingScheduler
    >>> client_end, server_end = LoopbackChannel.pair()
    >>> scheduler = ThreadingScheduler()
    >>> client = ConnectionManager(client_end, scheduler, name="client")
    >>> server = ConnectionManager(server_end, scheduler, name="server")
    >>> client_end.attach(client.receive)
    >>> server_end.attach(server.receive)
    >>> server.start(Role.SERVER)
    >>> client.start(Role.CLIENT)
"""

from peerwatch.config import PeerwatchSettings, get_settings
from peerwatch.exceptions import (
    ChannelUnavailableError,
    PeerwatchError,
    SchedulerShutdownError,
    SessionStateError,
    UnknownMessageError,
)
from peerwatch.interfaces import Channel, Manager, Registration, Scheduler
from peerwatch.keepalive import (
    KeepAliveSession,
    Role,
    SessionSnapshot,
    SessionStatus,
    StopReason,
)
from peerwatch.loopback import LoopbackChannel
from peerwatch.manager import ConnectionManager
from peerwatch.messages import PROTOCOL_NAME, Ack, Probe
from peerwatch.scheduler import ThreadingScheduler

__version__ = "0.3.0"

__all__ = [
    # Version
    "__version__",
    # Session
    "KeepAliveSession",
    "Role",
    "SessionSnapshot",
    "SessionStatus",
    "StopReason",
    # Messages
    "PROTOCOL_NAME",
    "Probe",
    "Ack",
    # Collaborators
    "Channel",
    "Manager",
    "Registration",
    "Scheduler",
    "ThreadingScheduler",
    "LoopbackChannel",
    "ConnectionManager",
    # Configuration
    "PeerwatchSettings",
    "get_settings",
    # Exceptions
    "PeerwatchError",
    "ChannelUnavailableError",
    "SessionStateError",
    "UnknownMessageError",
    "SchedulerShutdownError",
]
