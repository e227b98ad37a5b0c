#!/usr/bin/env python

# loggerlink CLI
import argparse
import logging
import os
import sys
from enum import Enum

from rich.console import Console
from rich.text import Text

from ..adapters.connection import ActionResult, ConnectionAdapter
from ..adapters.descriptors import DEFAULT_HOST, DEFAULT_PORT
from ..adapters.response_log import LogEntry
from ..adapters.session import DataLoggerSession
from ..adapters.timeout import Timeout
from ..tools.errors import ActionCancelledError, ActionTimeoutError, LoggerLinkError
from ..tools.log import log
from ..tools.log_settings import LOGGING_COLORS, LoggerAlias
from ..version import __version__

PASSWORD_ENVIRONMENT_VARIABLE = "LOGGERLINK_PASSWORD"
DEFAULT_WAIT = 60

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_TIMEOUT = 3


class Commands(Enum):
    SEND = "send"
    SYNC_CLOCK = "sync-clock"
    SHUTDOWN = "shutdown"


DESCRIPTION = {
    Commands.SEND: "Send a program file to a datalogger",
    Commands.SYNC_CLOCK: "Synchronize a datalogger clock with the server",
    Commands.SHUTDOWN: "Release the datalogger session",
}


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loggerlink",
        description="LoggerNet datalogger command line tool",
        epilog=f"The password can also be set with {PASSWORD_ENVIRONMENT_VARIABLE}",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--host", default=DEFAULT_HOST, help="LoggerNet server address")
    parser.add_argument("--port", default=DEFAULT_PORT, help="LoggerNet server port")
    parser.add_argument("-u", "--username", default="")
    parser.add_argument("-p", "--password", default=None)
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=DEFAULT_WAIT,
        help="Time to wait for the outcome, in seconds",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in Commands:
        subparser = subparsers.add_parser(command.value, help=DESCRIPTION[command])
        subparser.add_argument("logger", help="Datalogger name")
        if command == Commands.SEND:
            subparser.add_argument("program", help="Program file path")

    return parser


def print_entry(console: Console, entry: LogEntry) -> None:
    style = LOGGING_COLORS[logging.INFO if entry.ok else logging.ERROR]
    console.print(Text(entry.text, style=style))


def run(
    args: argparse.Namespace,
    console: Console,
    session: DataLoggerSession | None = None,
) -> int:
    logger = logging.getLogger(LoggerAlias.CLI.value)
    password = args.password
    if password is None:
        password = os.environ.get(PASSWORD_ENVIRONMENT_VARIABLE, "")

    try:
        adapter = ConnectionAdapter(
            args.host, args.port, args.username, password, session=session
        )
    except (ImportError, LoggerLinkError) as e:
        console.print(Text(str(e), style=LOGGING_COLORS[logging.ERROR]))
        return EXIT_FAILURE
    logger.info(f"Using {adapter}")

    start = len(adapter.response_log)
    command = Commands(args.command)
    result: ActionResult
    if command == Commands.SEND:
        result = adapter.send_program_file(args.logger, args.program)
    elif command == Commands.SYNC_CLOCK:
        result = adapter.sync_clocks(args.logger)
    elif command == Commands.SHUTDOWN:
        result = adapter.shut_down_logger(args.logger)
    else:
        raise RuntimeError(f"Command '{command.value}' is not supported yet")

    try:
        result.wait(Timeout(response=args.timeout, action="error"))
    except ActionTimeoutError as e:
        exit_code = EXIT_TIMEOUT
        console.print(Text(str(e), style=LOGGING_COLORS[logging.WARNING]))
    except ActionCancelledError as e:
        exit_code = EXIT_FAILURE
        console.print(Text(str(e), style=LOGGING_COLORS[logging.WARNING]))
    else:
        exit_code = EXIT_OK if result.ok else EXIT_FAILURE

    for entry in adapter.response_log.since(start):
        print_entry(console, entry)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    args = make_parser().parse_args(argv)

    if args.verbose:
        log("DEBUG", console=True, loggers="all")

    return run(args, Console())


if __name__ == "__main__":
    sys.exit(main())
