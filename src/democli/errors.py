"""Exception types raised by the demo CLI."""

from __future__ import annotations


class DemoCliError(Exception):
    """Base class for demo CLI failures."""


class CommandParsingError(DemoCliError):
    """Invocation could not be parsed."""


class UnrecognizedCommandError(CommandParsingError):
    """First positional token does not name a declared subcommand."""

    def __init__(self, name: str, nearest_matches: list[str]) -> None:
        super().__init__(f"Unrecognized command or argument '{name}'")
        self.name = name
        self.nearest_matches = nearest_matches


class ConfigCorruptError(DemoCliError):
    """Stored configuration file exists but is not a valid record."""


class ShellWriteError(DemoCliError):
    """Shell stopped accepting input before every command was written."""

    def __init__(self, written: int, total: int, reason: str) -> None:
        super().__init__(f"Shell accepted {written} of {total} commands: {reason}")
        self.written = written
        self.total = total
