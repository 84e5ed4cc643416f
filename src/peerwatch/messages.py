"""KeepAlive protocol messages.

Both messages are empty markers. Their only significance is their type and
the moment they arrive; framing and encoding belong to the messaging layer.
"""

from dataclasses import dataclass
from typing import ClassVar

PROTOCOL_NAME = "KeepAliveProtocol"


@dataclass(frozen=True)
class Probe:
    """Liveness check sent by the client every interval."""

    message_type: ClassVar[str] = "KeepAliveRequest"


@dataclass(frozen=True)
class Ack:
    """Reply sent by the server as soon as it receives a probe."""

    message_type: ClassVar[str] = "KeepAliveReply"


Message = Probe | Ack
