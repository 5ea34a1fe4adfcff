"""Command objects that turn parsed arguments into shell command lines."""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod

from .models import Configuration
from .shell import ShellSession


class CommandChain(ABC):
    """One node of the command hierarchy.

    ``create_args`` returns the lines to run, in execution order. A subcommand
    receives its parent's lines once, at construction, and puts them first.
    Only one level of nesting is supported.
    """

    name: str = ""

    def __init__(self, configuration: Configuration) -> None:
        self.configuration = configuration

    @abstractmethod
    def create_args(self) -> list[str]:
        """Return the shell command lines for this command."""

    def execute(self, session: ShellSession | None = None) -> int:
        """Run this command's lines in a shell session."""
        runner = session if session is not None else ShellSession()
        return runner.run(self.create_args())


class DemoCommand(CommandChain):
    """Root ``demo`` command."""

    name = "demo"

    def create_args(self) -> list[str]:
        # Base validation or setup lines shared by every subcommand go here.
        return []


class ExampleCommand(CommandChain):
    """``example`` subcommand, used for demonstration."""

    name = "example"

    def __init__(
        self,
        configuration: Configuration,
        parent_args: list[str],
        command: str | None = None,
        migration_name: str | None = None,
    ) -> None:
        super().__init__(configuration)
        self.parent_args = list(parent_args)
        self.command = command
        self.migration_name = migration_name

    def create_args(self) -> list[str]:
        args = list(self.parent_args)
        if self.command:
            args.append(self.command)
        if self.migration_name:
            args.append(f"echo {shlex.quote(self.migration_name)}")
        return args
