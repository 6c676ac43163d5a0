"""Messer CLI - Main entry point."""

import asyncio
import logging
from typing import Optional

import typer

from messer_cli.backend.gateway import GatewayBackend
from messer_cli.session import Session
from messer_cli.settings import settings
from messer_cli.terminal import console

app = typer.Typer(
    help="Messer - chat from your terminal",
    add_completion=False,
)


def configure_logging(debug: bool) -> None:
    log_level = "DEBUG" if debug else settings.log_level.upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format=settings.log_format,
    )


@app.command()
def messer(
    command: Optional[str] = typer.Option(None, "--command", "-c", help="Run a single command and exit"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the gateway base URL"),
    events_url: Optional[str] = typer.Option(None, "--events-url", help="Override the push events URL"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Log in and chat interactively, or run one command with --command."""
    configure_logging(debug)
    session = Session(GatewayBackend(base_url=base_url, events_url=events_url))

    try:
        if command is not None:
            result = asyncio.run(session.start_single(command))
            if result is not None:
                console.print(result, markup=False, highlight=False)
        else:
            asyncio.run(session.start())
    except KeyboardInterrupt:
        console.print("\n[dim]Ending session...[/dim]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
