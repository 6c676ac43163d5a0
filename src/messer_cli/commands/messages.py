"""Sending and reading messages: m, r and h."""

from typing import TYPE_CHECKING

from messer_cli.commands.parsing import compile_command, target
from messer_cli.errors import InvalidCommandError, NoActiveThreadError

if TYPE_CHECKING:
    from messer_cli.session import Session

MESSAGE_USAGE = 'm "<thread name>" <message>'
REPLY_USAGE = "r <message>"
HISTORY_USAGE = 'h "<thread name>" [count]'

MESSAGE_PATTERN = compile_command("m|message", r"\s+(?P<body>.+?)")
HISTORY_PATTERN = compile_command("h|history", r"(?:\s+(?P<count>\d+))?")


async def send_message(line: str, session: "Session") -> str:
    match = MESSAGE_PATTERN.match(line)
    if match is None:
        raise InvalidCommandError(f"Invalid command - usage: {MESSAGE_USAGE}")

    thread = await session.get_thread_by_name(target(match))
    await session.backend.send_message(match.group("body"), thread.id)
    session.last_thread = thread
    return f"Sent message to {thread.name or thread.id}"


async def reply(line: str, session: "Session") -> str:
    parts = line.strip().split(maxsplit=1)
    if len(parts) < 2:
        raise InvalidCommandError(f"Invalid command - usage: {REPLY_USAGE}")
    if session.last_thread is None:
        raise NoActiveThreadError()

    thread = session.last_thread
    await session.backend.send_message(parts[1], thread.id)
    return f"Sent reply to {thread.name or thread.id}"


async def history(line: str, session: "Session") -> str:
    match = HISTORY_PATTERN.match(line)
    if match is None:
        raise InvalidCommandError(f"Invalid command - usage: {HISTORY_USAGE}")

    count = int(match.group("count")) if match.group("count") else session.settings.history_limit
    thread = await session.get_thread_by_name(target(match))
    messages = await session.backend.get_thread_history(thread.id, count)
    if not messages:
        return f"No messages in {thread.name or thread.id}"

    return "\n".join(f"{session.sender_name(message.sender_id)}: {message.body}" for message in messages)
