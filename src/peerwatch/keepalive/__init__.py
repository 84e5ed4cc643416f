"""KeepAlive protocol session.

This package provides:
- KeepAliveSession, the per-connection liveness state machine
- Role and the client/server role strategies
- SessionStatus, StopReason and SessionSnapshot for inspecting a session
"""

from peerwatch.keepalive.roles import ClientRole, Role, RoleStrategy, ServerRole
from peerwatch.keepalive.session import KeepAliveSession
from peerwatch.keepalive.state import (
    SessionSnapshot,
    SessionState,
    SessionStatus,
    StopReason,
)

__all__ = [
    # Session
    "KeepAliveSession",
    # Roles
    "Role",
    "RoleStrategy",
    "ClientRole",
    "ServerRole",
    # State
    "SessionSnapshot",
    "SessionState",
    "SessionStatus",
    "StopReason",
]
