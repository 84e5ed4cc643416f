"""Custom exceptions for peerwatch package."""


class PeerwatchError(Exception):
    """Base exception class for all peerwatch errors."""


class ChannelUnavailableError(PeerwatchError):
    """Raised when a message cannot be sent because the channel is gone."""


class SessionStateError(PeerwatchError):
    """Raised when a session operation is invalid for its current state.

    Attributes:
        status: Status the session was in when the operation was attempted.
    """

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


class UnknownMessageError(PeerwatchError):
    """Raised when a message that is neither a probe nor an ack is received."""


class SchedulerShutdownError(PeerwatchError):
    """Raised when registering a callback on a scheduler that has shut down."""
