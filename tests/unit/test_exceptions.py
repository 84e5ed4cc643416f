"""Tests for peerwatch.exceptions module."""

from __future__ import annotations

import pytest

from peerwatch.exceptions import (
    ChannelUnavailableError,
    PeerwatchError,
    SchedulerShutdownError,
    SessionStateError,
    UnknownMessageError,
)


@pytest.mark.parametrize(
    "exc_type",
    [ChannelUnavailableError, SessionStateError, UnknownMessageError, SchedulerShutdownError],
)
def test_inherits_from_peerwatch_error(exc_type) -> None:
    assert issubclass(exc_type, PeerwatchError)


class TestSessionStateError:
    """Tests for SessionStateError."""

    def test_status_stored(self) -> None:
        err = SessionStateError("already running", status="running")
        assert err.status == "running"
        assert str(err) == "already running"

    def test_status_optional(self) -> None:
        assert SessionStateError("nope").status is None

    def test_exported_from_package(self) -> None:
        import peerwatch

        assert peerwatch.SessionStateError is SessionStateError
        assert "SessionStateError" in peerwatch.__all__
