"""Simulation command - run a client/server pair over a loopback channel."""

import json
import time
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from peerwatch.keepalive import Role, SessionSnapshot, StopReason
from peerwatch.loopback import LoopbackChannel
from peerwatch.manager import ConnectionManager
from peerwatch.scheduler import ThreadingScheduler

console = Console()

POLL_INTERVAL = 0.05
REASON_WIDTH = max(len(reason) for reason in StopReason)


def run_simulation(
    interval: float,
    tolerance: float,
    duration: float,
    silence_after: float | None,
) -> list[SessionSnapshot]:
    """Run a client and a server against each other and return their final state.

    Args:
        interval: Seconds between wake-ups.
        tolerance: Extra seconds of silence tolerated.
        duration: Maximum seconds to run.
        silence_after: If set, the server stops answering after this many seconds.

    Returns:
        Snapshots of the client and server sessions, in that order.
    """
    client_end, server_end = LoopbackChannel.pair()
    scheduler = ThreadingScheduler()
    options = {"interval": interval, "tolerance": tolerance}
    client = ConnectionManager(client_end, scheduler, name="client", **options)
    server = ConnectionManager(server_end, scheduler, name="server", **options)
    client_end.attach(client.receive)
    server_end.attach(server.receive)

    try:
        server.start(Role.SERVER)
        client.start(Role.CLIENT)

        started = time.monotonic()
        while time.monotonic() - started < duration:
            if silence_after is not None and time.monotonic() - started >= silence_after:
                server_end.drop_outbound = True
            if client.timed_out and server.timed_out:
                break
            time.sleep(POLL_INTERVAL)
    finally:
        for manager in (client, server):
            if manager.session.running:
                manager.session.stop()
        scheduler.shutdown()

    return [client.session.snapshot(), server.session.snapshot()]


def simulate(
    interval: Annotated[
        float, typer.Option("--interval", "-i", help="Seconds between wake-ups")
    ] = 1.0,
    tolerance: Annotated[
        float, typer.Option("--tolerance", "-t", help="Extra seconds of silence tolerated")
    ] = 0.1,
    duration: Annotated[
        float, typer.Option("--duration", "-d", help="Maximum seconds to run")
    ] = 8.0,
    silence_after: Annotated[
        float | None,
        typer.Option("--silence-after", help="Make the server stop answering after N seconds"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for scripting"),
    ] = False,
) -> None:
    """Run a client/server keepalive pair and report how each session ended."""
    if interval <= 0 or tolerance < 0 or duration <= 0:
        console.print("[red]✗ interval and duration must be positive, tolerance non-negative[/red]")
        raise typer.Exit(1)

    snapshots = run_simulation(interval, tolerance, duration, silence_after)

    if json_output:
        console.print(json.dumps([s.to_dict() for s in snapshots], indent=2, default=str))
        return

    table = Table(
        title="KeepAlive Simulation",
        title_style="bold",
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Session", style="cyan", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Reason", no_wrap=True, min_width=REASON_WIDTH)
    table.add_column("Probes sent", justify="right")
    table.add_column("Probes recv", justify="right")
    table.add_column("Acks sent", justify="right")
    table.add_column("Acks recv", justify="right")

    for snapshot in snapshots:
        reason = snapshot.stop_reason.value if snapshot.stop_reason else "-"
        reason_style = "dim" if reason in ("-", StopReason.STOPPED) else "red"
        state = snapshot.state
        table.add_row(
            snapshot.name,
            snapshot.status.value,
            f"[{reason_style}]{reason}[/{reason_style}]",
            str(state.probes_sent),
            str(state.probes_received),
            str(state.acks_sent),
            str(state.acks_received),
        )

    console.print(table)
