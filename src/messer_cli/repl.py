"""Interactive prompt loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from messer_cli.errors import MesserError
from messer_cli.terminal import console

if TYPE_CHECKING:
    from messer_cli.session import Session

logger = logging.getLogger(__name__)
PROMPT = "> "


async def read_line() -> str:
    return await asyncio.to_thread(console.input, PROMPT)


async def run_repl(session: "Session", read: Callable[[], Awaitable[str]] = read_line) -> None:
    """Read one line at a time and run it to completion before reading the next."""
    console.print("[dim]Type 'help' for commands, 'logout' to quit.[/dim]")

    while session.is_listening:
        try:
            line = await read()
        except EOFError:
            console.print("\n[dim]Ending session...[/dim]")
            break

        try:
            result = await session.process_command(line)
        except MesserError as e:
            console.print(str(e), style="red", markup=False)
            continue
        except Exception as e:
            logger.exception(f"Command failed unexpectedly: {line!r}")
            console.print(f"Error: {e}", style="red", markup=False)
            continue

        if result is not None:
            console.print(result, markup=False, highlight=False)
