"""KeepAlive session state machine.

A session watches one peer over one channel. The client sends a probe as soon
as it starts and again on every wake-up; the server answers each probe with an
ack. Both roles wake up every ``interval`` seconds and declare the peer dead
when nothing has been heard from it for more than ``interval + tolerance``.

Wake-ups run on the scheduler's thread while inbound probes and acks arrive on
the channel's receive path, so all state is guarded by a session lock. Sends
and manager notifications happen outside the lock.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import replace

from peerwatch.config import get_settings
from peerwatch.exceptions import ChannelUnavailableError, SessionStateError, UnknownMessageError
from peerwatch.interfaces import Channel, Manager, Registration, Scheduler
from peerwatch.keepalive.roles import Role, RoleStrategy, strategy_for
from peerwatch.keepalive.state import SessionSnapshot, SessionState, SessionStatus, StopReason
from peerwatch.logging import get_logger
from peerwatch.messages import PROTOCOL_NAME, Ack, Probe

LOG = get_logger(__name__)


class KeepAliveSession:
    """Liveness detection for one connection, as client or server.

    Example:
        >>> session = KeepAliveSession(channel, ThreadingScheduler(), manager)
        >>> session.start_as_client()
        >>> # the dispatch layer forwards inbound keepalive messages:
        >>> session.receive(Ack())
    """

    protocol_name = PROTOCOL_NAME

    def __init__(
        self,
        channel: Channel,
        scheduler: Scheduler,
        manager: Manager,
        *,
        interval: float | None = None,
        tolerance: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "keepalive",
    ) -> None:
        """Initialize a session that has not started yet.

        Args:
            channel: Channel used to send probes and acks.
            scheduler: Scheduler that runs the wake-up handler.
            manager: Connection owner notified when the peer times out.
            interval: Seconds between wake-ups. Defaults to settings.
            tolerance: Extra seconds of silence tolerated. Defaults to settings.
            clock: Monotonic clock returning seconds.
            name: Name used in log events.
        """
        settings = get_settings()
        self.interval = settings.interval if interval is None else interval
        self.tolerance = settings.tolerance if tolerance is None else tolerance
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        if self.tolerance < 0:
            raise ValueError("tolerance must not be negative")

        self.name = name
        self._channel = channel
        self._scheduler = scheduler
        self._manager = manager
        self._clock = clock

        self._lock = threading.RLock()
        self._status = SessionStatus.NOT_STARTED
        self._stop_reason: StopReason | None = None
        self._strategy: RoleStrategy | None = None
        self._state = SessionState()
        self._registration: Registration | None = None

    @property
    def threshold(self) -> float:
        """Seconds of silence after which the peer is considered dead."""
        return self.interval + self.tolerance

    @property
    def role(self) -> Role | None:
        return self._strategy.role if self._strategy else None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def running(self) -> bool:
        return self._status is SessionStatus.RUNNING

    @property
    def stop_reason(self) -> StopReason | None:
        return self._stop_reason

    def snapshot(self) -> SessionSnapshot:
        """Return a consistent copy of the session's current state."""
        with self._lock:
            return SessionSnapshot(
                name=self.name,
                role=self.role.value if self.role else None,
                status=self._status,
                stop_reason=self._stop_reason,
                interval=self.interval,
                threshold=self.threshold,
                state=replace(self._state),
            )

    # Lifecycle

    def start_as_client(self) -> None:
        """Start probing the server.

        Sends the first probe immediately and schedules the first wake-up.

        Raises:
            SessionStateError: If the session was already started.
            ChannelUnavailableError: If the first probe could not be sent. The
                session is stopped and the manager is not notified.
            SchedulerShutdownError: If the first wake-up could not be scheduled.
                The session is stopped and the manager is not notified.
        """
        self._start(Role.CLIENT)

    def start_as_server(self) -> None:
        """Start watching for probes from the client.

        Raises:
            SessionStateError: If the session was already started.
            SchedulerShutdownError: If the first wake-up could not be scheduled.
        """
        self._start(Role.SERVER)

    def _start(self, role: Role) -> None:
        with self._lock:
            if self._status is not SessionStatus.NOT_STARTED:
                raise SessionStateError(
                    f"Session {self.name!r} cannot start as {role}: already {self._status}",
                    status=self._status,
                )
            strategy = strategy_for(role)
            now = self._clock()
            self._strategy = strategy
            self._state.started_at = now
            strategy.reset_baseline(self._state, now)
            self._status = SessionStatus.RUNNING

        LOG.info("keepalive_started", session=self.name, role=role, interval=self.interval)

        try:
            strategy.on_start(self)
        except ChannelUnavailableError:
            with self._lock:
                self._terminate(StopReason.CHANNEL_UNAVAILABLE)
            LOG.error("keepalive_start_failed", session=self.name, role=role)
            raise

        with self._lock:
            if self._status is not SessionStatus.RUNNING:
                return
            try:
                self._schedule()
            except Exception:
                self._terminate(StopReason.SCHEDULER_UNAVAILABLE)
                LOG.error("keepalive_start_failed", session=self.name, role=role)
                raise

    def stop(self) -> None:
        """Stop a running session without notifying the manager.

        The pending wake-up is cancelled; one already in flight does nothing.
        Stopping a session that is not running only logs a warning.
        """
        with self._lock:
            stopped = self._terminate(StopReason.STOPPED)
            status = self._status
        if stopped:
            LOG.info("keepalive_stopped", session=self.name, role=self.role)
        else:
            LOG.warning("keepalive_stop_ignored", session=self.name, status=status)

    def _terminate(self, reason: StopReason) -> bool:
        # Caller holds the lock. Returns False if the session was not running.
        if self._status is not SessionStatus.RUNNING:
            return False
        self._status = SessionStatus.STOPPED
        self._stop_reason = reason
        self._state.stopped_at = self._clock()
        if self._registration is not None:
            self._registration.cancel()
            self._registration = None
        return True

    def _schedule(self) -> None:
        self._registration = self._scheduler.after(self.interval, self._on_wakeup)

    # Wake-up

    def _on_wakeup(self) -> None:
        with self._lock:
            self._registration = None
            if self._status is not SessionStatus.RUNNING:
                LOG.debug("keepalive_wakeup_ignored", session=self.name, status=self._status)
                return
            assert self._strategy is not None
            strategy = self._strategy
            elapsed = self._clock() - strategy.watched_timestamp(self._state)
            timed_out = elapsed > self.threshold
            if timed_out:
                self._terminate(StopReason.PEER_TIMEOUT)

        if timed_out:
            LOG.error(
                "peer_timeout",
                session=self.name,
                role=strategy.role,
                elapsed=round(elapsed, 3),
                threshold=self.threshold,
            )
            self._manager.notify_peer_timeout(self)
            return

        try:
            strategy.on_wakeup(self)
        except ChannelUnavailableError as exc:
            with self._lock:
                if not self._terminate(StopReason.CHANNEL_UNAVAILABLE):
                    return
            LOG.error("peer_unavailable", session=self.name, role=strategy.role, error=str(exc))
            self._manager.notify_peer_timeout(self)
            return

        with self._lock:
            if self._status is not SessionStatus.RUNNING:
                return
            try:
                self._schedule()
            except Exception:
                self._terminate(StopReason.SCHEDULER_UNAVAILABLE)
                LOG.exception("keepalive_reschedule_failed", session=self.name, role=strategy.role)
            else:
                return
        self._manager.notify_peer_timeout(self)

    # Outbound

    def _send_probe(self) -> None:
        with self._lock:
            if self._status is not SessionStatus.RUNNING:
                return
        self._channel.send(Probe())
        with self._lock:
            if self._status is SessionStatus.RUNNING:
                self._state.last_probe_sent_at = self._clock()
                self._state.probes_sent += 1
        LOG.debug("probe_sent", session=self.name)

    # Inbound

    def receive(self, message: object) -> None:
        """Dispatch an inbound keepalive message.

        Args:
            message: A Probe or an Ack.

        Raises:
            UnknownMessageError: If the message is neither.
            ChannelUnavailableError: If the ack for a probe could not be sent.
        """
        if isinstance(message, Probe):
            self.on_probe_received()
        elif isinstance(message, Ack):
            self.on_ack_received()
        else:
            raise UnknownMessageError(
                f"{self.protocol_name} cannot handle {type(message).__name__}"
            )

    def on_ack_received(self) -> None:
        """Record an ack from the server."""
        with self._lock:
            if not self._accepts(Role.CLIENT, "ack"):
                return
            self._state.last_ack_received_at = self._clock()
            self._state.acks_received += 1
        LOG.debug("ack_received", session=self.name)

    def on_probe_received(self) -> None:
        """Record a probe from the client and answer it with an ack.

        Raises:
            ChannelUnavailableError: If the ack could not be sent. This does
                not stop the session; only a wake-up decides a timeout.
        """
        with self._lock:
            if not self._accepts(Role.SERVER, "probe"):
                return
            self._state.last_probe_received_at = self._clock()
            self._state.probes_received += 1

        self._channel.send(Ack())
        with self._lock:
            if self._status is SessionStatus.RUNNING:
                self._state.acks_sent += 1
        LOG.debug("ack_sent", session=self.name)

    def _accepts(self, role: Role, kind: str) -> bool:
        # Caller holds the lock.
        if self._status is not SessionStatus.RUNNING:
            LOG.debug(f"{kind}_ignored", session=self.name, status=self._status)
            return False
        if self.role is not role:
            LOG.warning(f"unexpected_{kind}", session=self.name, role=self.role)
            return False
        return True
