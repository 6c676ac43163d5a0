"""Thread listing, contacts and the lock shorthand."""

from typing import TYPE_CHECKING

from messer_cli.commands.parsing import compile_command, target
from messer_cli.errors import InvalidCommandError

if TYPE_CHECKING:
    from messer_cli.session import Session

RECENT_USAGE = "recent [count]"
LOCK_USAGE = 'lock "<thread name>"'
DEFAULT_RECENT_COUNT = 5

LOCK_PATTERN = compile_command("lock")


async def recent(line: str, session: "Session") -> str:
    args = line.split()[1:]
    if len(args) > 1 or (args and not args[0].isdecimal()):
        raise InvalidCommandError(f"Invalid command - usage: {RECENT_USAGE}")
    count = int(args[0]) if args else DEFAULT_RECENT_COUNT

    await session.refresh_thread_list()
    threads = session.threads.recent(count)

    if not threads:
        return "No threads found"

    lines = []
    for index, thread in enumerate(threads, start=1):
        label = thread.name or thread.id
        unread = f" ({thread.unread_count} unread)" if thread.unread_count else ""
        lines.append(f"{index}. {label}{unread}")
    return "\n".join(lines)


async def contacts(line: str, session: "Session") -> str:
    friends = sorted(session.user.friends, key=lambda friend: friend.full_name.lower())
    if not friends:
        return "No contacts found"
    return "\n".join(friend.full_name for friend in friends)


async def lock(line: str, session: "Session") -> str:
    match = LOCK_PATTERN.match(line)
    if match is None:
        raise InvalidCommandError(f"Invalid command - usage: {LOCK_USAGE}")

    thread = await session.get_thread_by_name(target(match))
    name = thread.name or target(match)
    if '"' in name:
        raise InvalidCommandError(f"Cannot lock on to {name} - thread names with quotes are not supported")
    session.lock.lock(name)
    return f"Locked on to {name} - type 'unlock' to release"


async def unlock(line: str, session: "Session") -> str:
    locked_target = session.lock.target
    session.lock.unlock()
    if not locked_target:
        return "No thread is locked"
    return f"Unlocked from {locked_target}"
