from collections.abc import Mapping

from messer_cli.commands.registry import REGISTRY, Command
from messer_cli.errors import InvalidCommandError
from messer_cli.lock import LockState


class CommandDispatcher:
    """Turns one input line into the command that should run and the line it runs with."""

    def __init__(self, lock: LockState, registry: Mapping[str, Command] = REGISTRY) -> None:
        self.lock = lock
        self.registry = registry

    def route(self, raw_command: str) -> tuple[Command, str]:
        line = raw_command.rstrip("\r\n")
        tokens = line.split()
        command = self.registry.get(tokens[0]) if tokens else None

        if self.lock.is_locked:
            # "unlock" must be checked first so a locked session can always be released.
            if line.strip() == "unlock":
                command = self.registry.get("unlock")
            else:
                command = self.registry.get("m")
                line = f'm "{self.lock.target}" {line}'

        if command is None:
            raise InvalidCommandError()
        return command, line
