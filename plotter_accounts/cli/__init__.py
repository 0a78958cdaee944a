"""Command-line administration: command table, context wiring, shell."""

from plotter_accounts.cli.commands import COMMANDS, Command, CommandStatus, execute_line
from plotter_accounts.cli.context import CommandContext

__all__ = [
    "COMMANDS",
    "Command",
    "CommandContext",
    "CommandStatus",
    "execute_line",
]
