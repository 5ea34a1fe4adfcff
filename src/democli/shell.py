"""Pipe command lines into one spawned shell process."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Sequence

from .errors import ShellWriteError

logger = logging.getLogger(__name__)

SHELL_ENV_VAR = "DEMO_SHELL"

PopenFn = Callable[..., subprocess.Popen]


def default_shell() -> list[str]:
    """Resolve the shell program to launch for this host."""
    override = os.environ.get(SHELL_ENV_VAR)
    if override:
        return shlex.split(override)
    if os.name == "nt":
        return [os.environ.get("COMSPEC", "cmd.exe")]
    return ["/bin/sh"]


def change_directory_command(path: str) -> str:
    if os.name == "nt":
        return f'cd "{path}"'
    return f"cd {shlex.quote(path)}"


class ShellSession:
    """One shell process fed line by line through its standard input.

    Commands are queued, not awaited: each line is flushed to the shell before
    the next is written, but nothing waits for a line to finish executing.
    Callers that need ordering guarantees between commands should chain them
    in the shell itself (for example ``a && b``).
    """

    def __init__(
        self,
        shell: Sequence[str] | None = None,
        popen: PopenFn = subprocess.Popen,
        cwd_fn: Callable[[], str] = os.getcwd,
    ) -> None:
        self.shell = list(shell) if shell is not None else default_shell()
        self._popen = popen
        self._cwd = cwd_fn

    def run(self, commands: Sequence[str]) -> int:
        """Write ``commands`` then a change into the current directory, and close its input."""
        lines = list(commands)
        # The directory change goes last, after the caller's commands.
        lines.append(change_directory_command(self._cwd()))

        logger.debug("Starting shell %s for %d commands", self.shell, len(lines))
        proc = self._popen(self.shell, stdin=subprocess.PIPE, text=True)
        try:
            self._write_all(proc, lines)
        finally:
            self._release(proc)
        return 0

    def _write_all(self, proc: subprocess.Popen, lines: list[str]) -> None:
        stdin = proc.stdin
        if stdin is None:
            raise ShellWriteError(0, len(lines), "shell has no input stream")
        for written, line in enumerate(lines):
            try:
                stdin.write(line + "\n")
                stdin.flush()
            except OSError as exc:
                raise ShellWriteError(written, len(lines), str(exc)) from exc
            logger.debug("Queued: %s", line)

    def _release(self, proc: subprocess.Popen) -> None:
        """Send end-of-input and drop the shell without waiting for it."""
        if proc.stdin is not None:
            try:
                proc.stdin.close()
            except OSError:
                # Closing flushes; a dead shell makes that fail and there is nothing left to send.
                logger.debug("Shell input already broken on close")
        # Not awaited: a shell still running here finishes on its own and
        # subprocess reaps it once it exits.
        if proc.poll() is None:
            logger.debug("Shell still running after end of input; leaving it to finish")
        else:
            logger.debug("Shell exited with %s", proc.returncode)
