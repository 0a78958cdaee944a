"""Administrative command table.

Each command takes the full token list (token 0 is the command name) and
an output stream, checks its own argument count, and calls into the
application services. execute_line is the single dispatch point used by
the REPL and by one-shot invocations.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from plotter_accounts.cli.context import CommandContext
from plotter_accounts.core.constants import CORRUPT_ENTRY_MARKER, PUBLIC_TAG
from plotter_accounts.domain.exceptions import (
    InvalidOperationException,
    NotFoundException,
    PlotterAccountsException,
)
from plotter_accounts.infrastructure.exceptions import CorruptRecordException
from plotter_accounts.shared.utils.sets import join_for_display

logger = logging.getLogger(__name__)

HELP_HEADER = (
    "Type one of the following commands and press <Enter> or <Return> to execute it:"
)
PUBLIC_RETAINED_MESSAGE = f'All user accounts must be assigned the "{PUBLIC_TAG}" tag'


class CommandStatus(str, Enum):
    """Outcome of dispatching one command line."""

    OK = "ok"
    FAILED = "failed"
    USAGE = "usage"
    UNKNOWN = "unknown"
    EMPTY = "empty"
    EXIT = "exit"


def write_line(output: TextIO, message: str = "") -> None:
    print(message, file=output)


def _plural(count: int, singular: str, plural: str) -> str:
    return f"Deleted 1 {singular}" if count == 1 else f"Deleted {count} {plural}"


Handler = Callable[[CommandContext, list[str], TextIO], Awaitable[None]]


@dataclass(frozen=True)
class Command:
    """A named command with its argument-count contract and handler.

    min_args/max_args count arguments after the command name;
    max_args None means unbounded.
    """

    name: str
    usage_args: str
    hint: str
    min_args: int
    max_args: int | None
    handler: Handler

    def accepts(self, tokens: list[str]) -> bool:
        """Return True if tokens carry an acceptable number of arguments."""
        count = len(tokens) - 1
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    def usage(self) -> str:
        return f"Usage: {self.name} {self.usage_args}".rstrip()

    def write_usage(self, output: TextIO) -> None:
        write_line(output, f"{self.name} - {self.hint}")
        write_line(output, self.usage())

    async def run(self, ctx: CommandContext, tokens: list[str], output: TextIO) -> bool:
        """Run the handler if arity is valid. Returns False (usage printed) otherwise."""
        if not self.accepts(tokens):
            self.write_usage(output)
            return False
        await self.handler(ctx, tokens, output)
        return True


def _optional_prefix(tokens: list[str]) -> str:
    return tokens[1] if len(tokens) == 2 else ""


async def _adduser(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    await ctx.accounts.create_account(tokens[1], tokens[2], tokens[3:])


async def _setpassword(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    await ctx.accounts.set_password(tokens[1], tokens[2])


async def _rmuser(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    count = await ctx.accounts.delete_accounts(tokens[1:])
    write_line(output, _plural(count, "account", "accounts"))


async def _rmusers(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    count = await ctx.accounts.delete_accounts_by_prefix(tokens[1])
    write_line(output, _plural(count, "account", "accounts"))


async def _grant(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    await ctx.accounts.grant_tags(tokens[1], tokens[2:])


async def _revoke(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    outcome = await ctx.accounts.revoke_tags(tokens[1], tokens[2:])
    if outcome.public_retained:
        write_line(output, PUBLIC_RETAINED_MESSAGE)


async def _showuser(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    for username in tokens[1:]:
        account = await ctx.accounts.get_account(username)
        write_line(output, f"{username}: {join_for_display(account.tags)}")


async def _lsusers(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    for account in await ctx.accounts.list_accounts(_optional_prefix(tokens)):
        if account.is_corrupt:
            write_line(output, f"{account.username} {CORRUPT_ENTRY_MARKER}")
        else:
            write_line(output, f"{account.username}: {join_for_display(account.tags)}")


async def _deftag(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    await ctx.tags.define_tag(tokens[1], tokens[2:])


async def _undeftag(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    count = 0
    for tag in tokens[1:]:
        try:
            count += await ctx.tags.delete_tag(tag)
        except InvalidOperationException as e:
            write_line(output, e.message)
    write_line(output, _plural(count, "tag definition", "tag definitions"))


async def _undeftags(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    count = await ctx.tags.delete_tags_by_prefix(tokens[1])
    write_line(output, _plural(count, "tag definition", "tag definitions"))


async def _addprefix(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    await ctx.tags.add_prefixes(tokens[1], tokens[2:])


async def _rmprefix(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    await ctx.tags.remove_prefixes(tokens[1], tokens[2:])


async def _showtagdef(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    for tag in tokens[1:]:
        tagdef = await ctx.tags.get_tag_definition(tag)
        write_line(output, f"{tag}: {join_for_display(tagdef.prefixes)}")


async def _lstagdefs(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    for tagdef in await ctx.tags.list_tag_definitions(_optional_prefix(tokens)):
        if tagdef.is_corrupt:
            write_line(output, f"{tagdef.tag} {CORRUPT_ENTRY_MARKER}")
        else:
            write_line(output, f"{tagdef.tag}: {join_for_display(tagdef.prefixes)}")


async def _ls(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    try:
        rows = await ctx.resolver.resolve_listing(_optional_prefix(tokens))
    except (NotFoundException, CorruptRecordException) as e:
        tag = e.details.get("key", "?")
        write_line(output, f"Could not retrieve tag information for '{tag}': {e.message}")
        return
    for row in rows:
        if row.permissions is None:
            write_line(output, f"{row.username} {CORRUPT_ENTRY_MARKER}")
        else:
            write_line(output, f"{row.username}: {' '.join(row.permissions.display_items())}")


async def _exit(ctx: CommandContext, tokens: list[str], output: TextIO) -> None:
    ctx.running = False


COMMANDS: dict[str, Command] = {
    c.name: c
    for c in (
        Command("adduser", "username password [tag1] [tag2] ...", "creates a new user account", 2, None, _adduser),
        Command("setpassword", "username password", "sets a user's password", 2, 2, _setpassword),
        Command("rmuser", "username1 [username2] [username3] ...", "deletes user accounts", 1, None, _rmuser),
        Command("rmusers", "usernameprefix", "deletes all user accounts whose username begins with a certain prefix", 1, 1, _rmusers),
        Command("grant", "username tag1 [tag2] [tag3] ...", "grants a user permission to view streams with one or more tags", 2, None, _grant),
        Command("revoke", "username tag1 [tag2] [tag3] ...", "revokes tags from a user's permission list", 2, None, _revoke),
        Command("showuser", "username1 [username2] [username3] ...", "shows the tags granted to a user or users", 1, None, _showuser),
        Command("lsusers", "[prefix]", "shows the tags granted to all user accounts whose names begin with a given prefix", 0, 1, _lsusers),
        Command("deftag", "tag pathprefix1 [pathprefix2] ...", "defines a new tag, which is a unit of permissions that can be granted to a user", 2, None, _deftag),
        Command("undeftag", "tag1 [tag2] [tag3] ...", "deletes tag definitions", 1, None, _undeftag),
        Command("undeftags", "prefix", "deletes all tag definitions where the tag name begins with a certain prefix", 1, 1, _undeftags),
        Command("addprefix", "tag prefix1 [prefix2] [prefix3] ...", "adds a path prefix to a tag definition", 2, None, _addprefix),
        Command("rmprefix", "tag prefix1 [prefix2] [prefix3] ...", "removes a path prefix from a tag definition", 2, None, _rmprefix),
        Command("showtagdef", "tag1 [tag2] [tag3] ...", "lists the prefixes assigned to a tag", 1, None, _showtagdef),
        Command("lstagdefs", "[prefix]", "lists the prefixes assigned to all tags whose names begin with a certain prefix", 0, 1, _lstagdefs),
        Command("ls", "[prefix]", "lists the path prefixes viewable by each user in the current configuration", 0, 1, _ls),
        Command("exit", "", "ends the session", 0, 0, _exit),
        Command("close", "", "ends the session", 0, 0, _exit),
    )
}


def write_help(output: TextIO, tokens: list[str] | None = None) -> None:
    """Print the command list, or one command's usage for "help <command>"."""
    if tokens and len(tokens) > 1 and tokens[1] in COMMANDS:
        COMMANDS[tokens[1]].write_usage(output)
        return
    write_line(output, HELP_HEADER)
    write_line(output, " ".join(["help", *COMMANDS]))


async def execute_line(line: str, ctx: CommandContext, output: TextIO) -> CommandStatus:
    """Dispatch one command line.

    Domain and store errors are printed as "Operation failed: <message>".
    The command runs under ctx.timeout_seconds; a timeout cancels the
    in-flight store call and is reported the same way.
    """
    tokens = line.split()
    if not tokens:
        return CommandStatus.EMPTY
    opcode = tokens[0]
    if opcode == "help":
        write_help(output, tokens)
        return CommandStatus.OK
    command = COMMANDS.get(opcode)
    if command is None:
        write_line(output, f"'{opcode}' is not a valid command")
        write_help(output)
        return CommandStatus.UNKNOWN
    try:
        args_ok = await asyncio.wait_for(
            command.run(ctx, tokens, output), timeout=ctx.timeout_seconds
        )
    except asyncio.TimeoutError:
        logger.warning("Command %s timed out after %s seconds", opcode, ctx.timeout_seconds)
        write_line(output, f"Operation failed: timed out after {ctx.timeout_seconds} seconds")
        return CommandStatus.FAILED
    except PlotterAccountsException as e:
        logger.debug("Command %s failed: %s (%s)", opcode, e.message, e.error_code)
        write_line(output, f"Operation failed: {e.message}")
        return CommandStatus.FAILED
    if not args_ok:
        return CommandStatus.USAGE
    return CommandStatus.OK if ctx.running else CommandStatus.EXIT
