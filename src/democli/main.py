"""CLI entrypoint for the demo command runner."""

from __future__ import annotations

import argparse
import difflib
import logging
import sys
from collections.abc import Callable, Sequence
from typing import NoReturn

from . import __version__
from .commands import CommandChain, DemoCommand, ExampleCommand
from .config import ConfigurationStore
from .errors import CommandParsingError, UnrecognizedCommandError
from .models import Configuration
from .shell import ShellSession

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]

SUBCOMMANDS = (ExampleCommand.name,)
HELP_FLAGS = ("-?", "-h", "--help")
EARLY_EXIT_FLAGS = frozenset((*HELP_FLAGS, "--version"))
GENERIC_ERROR_LINES = (
    "An exception occurred, please check if you wrote a valid command",
    "One of the common mistakes is specifying arguments in the incorrect order",
    "Run tool -h or tool <command name> -h to receive information about the command",
)


class _Parser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad input."""

    def error(self, message: str) -> NoReturn:
        raise CommandParsingError(message)


def _add_help(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(*HELP_FLAGS, action="help", help="Show help information")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="demo", description="Run shell commands built from a command hierarchy", add_help=False)
    _add_help(parser)
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command_name", metavar="<command>")
    example = subparsers.add_parser(
        ExampleCommand.name,
        help="Example command, used for demonstration",
        description="Example command, used for demonstration",
        add_help=False,
    )
    _add_help(example)
    example.add_argument("command", nargs="?", default=None, metavar="Command", help="Example argument")
    example.add_argument("-opt", dest="migration_name", metavar="MigrationName", help="Example option")
    return parser


def _check_subcommand(name: str) -> None:
    if name not in SUBCOMMANDS:
        raise UnrecognizedCommandError(name, difflib.get_close_matches(name, SUBCOMMANDS))


def _prepare_argv(argv: Sequence[str]) -> list[str]:
    """Validate the subcommand token and drop a ``--`` placed before it.

    Help and version flags ahead of the subcommand win, so nothing after them
    is checked.
    """
    args = list(argv)
    for index, token in enumerate(args):
        if token in EARLY_EXIT_FLAGS:
            return args
        if token == "--":
            del args[index]
            if index < len(args):
                _check_subcommand(args[index])
            return args
        if not token.startswith("-"):
            _check_subcommand(token)
            return args
    return args


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    return build_parser().parse_args(_prepare_argv(argv))


def resolve_command(parsed: argparse.Namespace, configuration: Configuration) -> CommandChain:
    """Build the command object selected by the parsed invocation."""
    root = DemoCommand(configuration)
    if parsed.command_name == ExampleCommand.name:
        return ExampleCommand(
            configuration,
            parent_args=root.create_args(),
            command=parsed.command,
            migration_name=parsed.migration_name,
        )
    return root


def run(
    argv: Sequence[str] | None = None,
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    store: ConfigurationStore | None = None,
    session: ShellSession | None = None,
) -> int:
    """Run the CLI and return the process exit code."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        try:
            parsed = parse_args(args)
        except SystemExit as exc:
            # Help and version output end parsing early.
            return exc.code if isinstance(exc.code, int) else 0

        logging.getLogger(__package__).setLevel(logging.DEBUG if parsed.verbose else logging.WARNING)
        config_store = store if store is not None else ConfigurationStore(input_fn=input_fn, print_fn=print_fn)
        command = resolve_command(parsed, config_store.get_configuration())
        return command.execute(session)
    except CommandParsingError as exc:
        print_fn(str(exc))
        if isinstance(exc, UnrecognizedCommandError) and exc.nearest_matches:
            print_fn("")
            print_fn("Did you mean this?")
            print_fn("    " + exc.nearest_matches[0])
        return 1
    except Exception as exc:
        logger.debug("Command failed", exc_info=True)
        for line in GENERIC_ERROR_LINES:
            print_fn(line)
        print_fn(f"Exception message: {exc}")
        return 1


def main_entry() -> None:
    """Console script entrypoint."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
