from messer_cli.commands.dispatcher import CommandDispatcher
from messer_cli.commands.registry import COMMANDS, REGISTRY, Command, get_command

__all__ = ["COMMANDS", "REGISTRY", "Command", "CommandDispatcher", "get_command"]
