"""End-to-end tests: two sessions over a loopback channel on timer threads."""

import threading

import pytest

from peerwatch.keepalive import Role, StopReason
from peerwatch.loopback import LoopbackChannel
from peerwatch.manager import ConnectionManager
from peerwatch.scheduler import ThreadingScheduler

INTERVAL = 0.1
TOLERANCE = 0.1


@pytest.fixture
def wired():
    client_end, server_end = LoopbackChannel.pair()
    scheduler = ThreadingScheduler()
    client = ConnectionManager(
        client_end, scheduler, name="client", interval=INTERVAL, tolerance=TOLERANCE
    )
    server = ConnectionManager(
        server_end, scheduler, name="server", interval=INTERVAL, tolerance=TOLERANCE
    )
    client_end.attach(client.receive)
    server_end.attach(server.receive)
    yield client, server, client_end, server_end
    client.close()
    server.close()
    scheduler.shutdown()


class TestKeepAliveOverLoopback:
    """Client and server sessions talking to each other."""

    def test_healthy_connection_never_times_out(self, wired):
        client, server, _, _ = wired
        server.start(Role.SERVER)
        client.start(Role.CLIENT)

        assert not client.wait_for_timeout(INTERVAL * 6)
        assert not server.timed_out
        assert client.session.snapshot().state.acks_received >= 1

    def test_silent_server_times_out_client(self, wired):
        client, server, _, server_end = wired
        server.start(Role.SERVER)
        server_end.drop_outbound = True
        client.start(Role.CLIENT)

        assert client.wait_for_timeout(5.0)
        assert client.session.stop_reason == StopReason.PEER_TIMEOUT
        assert client.timeouts == 1

    def test_client_gone_times_out_server(self, wired):
        client, server, _, _ = wired
        server.start(Role.SERVER)
        client.start(Role.CLIENT)

        client.session.stop()

        assert server.wait_for_timeout(5.0)
        assert server.session.stop_reason == StopReason.PEER_TIMEOUT
        assert not client.timed_out

    def test_closed_channel_reported_as_unavailable(self, wired):
        client, server, client_end, _ = wired
        server.start(Role.SERVER)
        client.start(Role.CLIENT)

        client_end.close()

        assert client.wait_for_timeout(5.0)
        assert client.session.stop_reason == StopReason.CHANNEL_UNAVAILABLE

    def test_concurrent_acks_and_wakeups(self, wired):
        """Inbound acks from many threads race with wake-ups without corrupting state."""
        client, server, _, _ = wired
        server.start(Role.SERVER)
        client.start(Role.CLIENT)

        def hammer() -> None:
            for _ in range(500):
                client.session.on_ack_received()

        threads = [threading.Thread(target=hammer) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert client.session.running
        assert client.session.snapshot().state.acks_received >= 2000
        assert client.timeouts == 0
