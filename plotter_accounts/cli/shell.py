"""Interactive account administration shell.

Usage:
    plotter-accounts                      # interactive session
    plotter-accounts <command> [args...]  # run one command and exit

Connection settings come from the environment / .env (see
plotter_accounts.core.config). CONFIG_KEY_PREFIX selects which
configuration in a shared store is administered.
"""

from __future__ import annotations

import asyncio
import logging
import sys
import threading
from typing import TextIO

from pydantic import ValidationError

from plotter_accounts.cli.commands import CommandStatus, execute_line
from plotter_accounts.cli.context import CommandContext
from plotter_accounts.core.config import get_settings
from plotter_accounts.domain.exceptions import PlotterAccountsException
from plotter_accounts.infrastructure.store import ConfigStoreFactory
from plotter_accounts.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)

PROMPT = "Plotter Accounts> "
READER_THREAD_NAME = "plotter-accounts-stdin"


def _deliver(future: asyncio.Future[str], line: str | None, error: BaseException | None) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(line or "")


async def read_line(stdin: TextIO) -> str:
    """Read one line without blocking the event loop.

    The read runs on a daemon thread, not the loop's executor: a read still
    blocked at the prompt after Ctrl-C must not hold up interpreter exit.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def reader() -> None:
        line: str | None = None
        error: BaseException | None = None
        try:
            line = stdin.readline()
        except (OSError, ValueError) as e:
            error = e
        if not loop.is_closed():
            loop.call_soon_threadsafe(_deliver, future, line, error)

    threading.Thread(target=reader, name=READER_THREAD_NAME, daemon=True).start()
    return await future


async def run_shell(ctx: CommandContext, stdin: TextIO, output: TextIO) -> None:
    """Read and execute lines until EOF or exit/close."""
    while ctx.running:
        output.write(PROMPT)
        output.flush()
        line = await read_line(stdin)
        if not line:
            # EOF (Ctrl-D): finish the prompt line before leaving
            output.write("\n")
            break
        await execute_line(line, ctx, output)


async def run(argv: list[str], stdin: TextIO, output: TextIO) -> int:
    """Connect, run one command or the interactive loop, then close the store."""
    settings = get_settings()
    if settings.config_key_prefix:
        print(f"Using configuration '{settings.config_key_prefix}'", file=output)
    try:
        store = await ConfigStoreFactory.create_store(settings)
    except PlotterAccountsException as e:
        print(f"Could not connect to config store: {e.message}", file=sys.stderr)
        return 1
    keyspace = ConfigStoreFactory.create_keyspace(settings)
    ctx = CommandContext.build(store, keyspace, settings)
    try:
        if argv:
            status = await execute_line(" ".join(argv), ctx, output)
            if status in (CommandStatus.USAGE, CommandStatus.UNKNOWN):
                return 2
            return 1 if status is CommandStatus.FAILED else 0
        await run_shell(ctx, stdin, output)
        return 0
    finally:
        await store.close()
        logger.debug("Config store closed")


def main(argv: list[str] | None = None) -> int:
    """Console entry point. Returns 0 on success, 1 on failure, 2 on bad usage or config."""
    try:
        setup_logging()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    args = sys.argv[1:] if argv is None else argv
    try:
        return asyncio.run(run(args, sys.stdin, sys.stdout))
    except KeyboardInterrupt:
        print(file=sys.stdout)
        return 130


if __name__ == "__main__":
    sys.exit(main())
