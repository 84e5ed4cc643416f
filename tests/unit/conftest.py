"""Shared fixtures for unit tests.

FakeClock and ManualScheduler let tests drive a session through time without
waiting: the scheduler only fires callbacks when the test advances it.
"""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from peerwatch.keepalive import KeepAliveSession

INTERVAL = 20.0
TOLERANCE = 0.1


class FakeClock:
    """Monotonic clock whose time is set by the test."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class ManualRegistration:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that fires callbacks only when advanced."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.registrations: list[ManualRegistration] = []

    def after(self, delay: float, callback: Callable[[], None]) -> ManualRegistration:
        registration = ManualRegistration(self.clock.now + delay, callback)
        self.registrations.append(registration)
        return registration

    @property
    def pending(self) -> list[ManualRegistration]:
        return [r for r in self.registrations if not r.cancelled and not r.fired]

    def advance_to(self, when: float) -> None:
        """Move the clock to ``when``, firing due callbacks in order."""
        while True:
            due = [r for r in self.pending if r.due <= when]
            if not due:
                break
            registration = min(due, key=lambda r: r.due)
            self.clock.now = registration.due
            registration.fired = True
            registration.callback()
        self.clock.now = when


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def channel() -> MagicMock:
    return MagicMock()


@pytest.fixture
def manager() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_session(
    channel: MagicMock, scheduler: ManualScheduler, manager: MagicMock, clock: FakeClock
) -> Callable[..., KeepAliveSession]:
    """Factory for sessions wired to the fake collaborators."""

    def _make(**kwargs) -> KeepAliveSession:
        options = {"interval": INTERVAL, "tolerance": TOLERANCE, "clock": clock}
        options.update(kwargs)
        return KeepAliveSession(channel, scheduler, manager, **options)

    return _make
