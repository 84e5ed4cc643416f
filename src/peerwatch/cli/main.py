"""peerwatch CLI - exercise the KeepAlive protocol from the terminal."""

import os
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel

import peerwatch
from peerwatch.cli.simulate_commands import simulate
from peerwatch.config import get_settings
from peerwatch.logging import configure_logging

# Configure logging early using env vars directly; -v/-vv and --log-format
# in main_callback() may reconfigure later.
configure_logging(
    level=os.environ.get("PEERWATCH_LOG_LEVEL", "WARNING"),
    json_output=os.environ.get("PEERWATCH_LOG_FORMAT", "console") == "json",
)

app = typer.Typer(
    name="peerwatch",
    help="""
    peerwatch - KeepAlive liveness detection between two peers

    \b
    Quick start:
      peerwatch config                       Show protocol settings
      peerwatch simulate                     Run a healthy client/server pair
      peerwatch simulate --silence-after 2   Watch both sides detect a dead peer
    """,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()

app.command("simulate")(simulate)


@app.callback(invoke_without_command=True)
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v for info, -vv for debug)",
        ),
    ] = 0,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            help="Log output format: console (human-readable) or json (structured)",
        ),
    ] = None,
) -> None:
    """peerwatch - KeepAlive liveness detection between two peers."""
    settings = get_settings()
    json_output = (log_format or settings.log_format) == "json"

    # Reconfigure logging if -v flags or --log-format override the settings default
    if verbose >= 2:
        configure_logging(level="DEBUG", json_output=json_output)
    elif verbose >= 1:
        configure_logging(level="INFO", json_output=json_output)
    elif log_format is not None:
        configure_logging(level=settings.log_level, json_output=json_output)


@app.command("version")
def version() -> None:
    """Show peerwatch version."""
    console.print(
        Panel(
            f"[bold cyan]peerwatch[/bold cyan] v{peerwatch.__version__}\n\n"
            f"[dim]Protocol:[/dim] {peerwatch.PROTOCOL_NAME}",
            title="KeepAlive liveness detection",
            border_style="cyan",
        )
    )


@app.command("config")
def show_config() -> None:
    """Show effective protocol and logging settings."""
    settings = get_settings()
    lines = [f"[dim]{key}:[/dim] {value}" for key, value in settings.to_display_dict().items()]
    console.print(Panel("\n".join(lines), title="⚙ peerwatch settings", border_style="cyan"))


def main() -> None:
    """Entry point for the peerwatch console script."""
    app()


if __name__ == "__main__":
    main()
