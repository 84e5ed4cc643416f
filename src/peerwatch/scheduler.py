"""Thread-backed scheduler for keepalive wake-ups."""

import threading
from collections.abc import Callable

from peerwatch.exceptions import SchedulerShutdownError
from peerwatch.logging import get_logger

LOG = get_logger(__name__)


class TimerRegistration:
    """A callback waiting on a ``threading.Timer``."""

    def __init__(self, scheduler: "ThreadingScheduler", callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._callback = callback
        self._timer: threading.Timer | None = None
        self.cancelled = False

    def cancel(self) -> None:
        """Cancel the callback. Has no effect once it has started running."""
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        self._scheduler._discard(self)

    def _run(self) -> None:
        self._scheduler._discard(self)
        if self.cancelled:
            return
        try:
            self._callback()
        except Exception:
            # Nothing above a timer thread can handle this; record it.
            LOG.exception("scheduled_callback_failed", callback=repr(self._callback))


class ThreadingScheduler:
    """Runs each callback once on its own daemon timer thread.

    Example:
        >>> scheduler = ThreadingScheduler()
        >>> registration = scheduler.after(20.0, session_wakeup)
        >>> registration.cancel()
        >>> scheduler.shutdown()
    """

    def __init__(self, name: str = "peerwatch-timer") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._pending: set[TimerRegistration] = set()
        self._shutdown = False

    def after(self, delay: float, callback: Callable[[], None]) -> TimerRegistration:
        """Run ``callback`` once after ``delay`` seconds.

        Raises:
            SchedulerShutdownError: If shutdown() has been called.
        """
        with self._lock:
            if self._shutdown:
                raise SchedulerShutdownError(f"Scheduler {self.name!r} is shut down")
            registration = TimerRegistration(self, callback)
            timer = threading.Timer(delay, registration._run)
            timer.daemon = True
            timer.name = self.name
            registration._timer = timer
            self._pending.add(registration)
            timer.start()
        return registration

    @property
    def pending(self) -> int:
        """Number of callbacks that have neither run nor been cancelled."""
        with self._lock:
            return len(self._pending)

    def shutdown(self) -> None:
        """Cancel every pending callback and refuse new ones."""
        with self._lock:
            self._shutdown = True
            pending = list(self._pending)
        for registration in pending:
            registration.cancel()
        LOG.debug("scheduler_shutdown", scheduler=self.name, cancelled=len(pending))

    def _discard(self, registration: TimerRegistration) -> None:
        with self._lock:
            self._pending.discard(registration)
