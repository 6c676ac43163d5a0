"""The fixed table of verbs the session understands."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from messer_cli.commands import messages, threads

if TYPE_CHECKING:
    from messer_cli.session import Session

Handler = Callable[[str, "Session"], Awaitable[str | None]]


@dataclass(frozen=True)
class Command:
    name: str
    handler: Handler
    usage: str
    help: str
    aliases: tuple[str, ...] = ()


async def show_help(line: str, session: "Session") -> str:
    width = max(len(command.usage) for command in COMMANDS)
    return "\n".join(f"{command.usage.ljust(width)}  {command.help}" for command in COMMANDS)


async def logout(line: str, session: "Session") -> str:
    await session.logout()
    return "Logged out"


COMMANDS: tuple[Command, ...] = (
    Command("m", messages.send_message, messages.MESSAGE_USAGE, "Send a message to a thread", ("message",)),
    Command("r", messages.reply, messages.REPLY_USAGE, "Reply to the last thread", ("reply",)),
    Command("h", messages.history, messages.HISTORY_USAGE, "Show recent messages in a thread", ("history",)),
    Command("recent", threads.recent, threads.RECENT_USAGE, "List the most recent threads"),
    Command("contacts", threads.contacts, "contacts", "List your friends"),
    Command("lock", threads.lock, threads.LOCK_USAGE, "Send every following line to one thread"),
    Command("unlock", threads.unlock, "unlock", "Release the locked thread"),
    Command("help", show_help, "help", "Show this help"),
    Command("logout", logout, "logout", "Log out and end the session"),
)

REGISTRY: Mapping[str, Command] = MappingProxyType(
    {verb: command for command in COMMANDS for verb in (command.name, *command.aliases)}
)


def get_command(verb: str) -> Command | None:
    return REGISTRY.get(verb)
