"""Console helpers: prompts and terminal title notifications."""

import asyncio
import sys

from rich.console import Console

from messer_cli.backend.base import Credentials
from messer_cli.settings import settings

console = Console()


def title_for(unread_count: int) -> str:
    return f"messer ({unread_count})" if unread_count > 0 else "messer"


def notify_terminal(unread_count: int = 0) -> None:
    """Show the unread count in the terminal title."""
    if not settings.notify_terminal or not sys.stdout.isatty():
        return
    sys.stdout.write(f"\x1b]0;{title_for(unread_count)}\x07")
    sys.stdout.flush()


async def prompt_credentials() -> Credentials:
    email = await asyncio.to_thread(console.input, "[bold]Email:[/bold] ")
    password = await asyncio.to_thread(console.input, "[bold]Password:[/bold] ", password=True)
    return Credentials(email=email.strip(), password=password)


async def prompt_code() -> str:
    code = await asyncio.to_thread(console.input, "[bold]Enter code > [/bold]")
    return code.strip()
