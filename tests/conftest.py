from __future__ import annotations

import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeStdin:
    """Records writes and flushes in call order."""

    def __init__(self, fail_after: int | None = None) -> None:
        self.events: list[tuple[str, str]] = []
        self.closed = False
        self._fail_after = fail_after

    def write(self, text: str) -> int:
        writes = sum(1 for kind, _ in self.events if kind == "write")
        if self._fail_after is not None and writes >= self._fail_after:
            raise BrokenPipeError("shell went away")
        self.events.append(("write", text))
        return len(text)

    def flush(self) -> None:
        self.events.append(("flush", ""))

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> list[str]:
        return [text for kind, text in self.events if kind == "write"]


class FakeProcess:
    def __init__(
        self, args: list[str], stdin: FakeStdin, kwargs: dict[str, object], returncode: int | None = None
    ) -> None:
        self.args = args
        self.stdin = stdin
        self.kwargs = kwargs
        self.returncode = returncode
        self.polled = False
        self.waited = False

    def poll(self) -> int | None:
        self.polled = True
        return self.returncode

    def wait(self) -> int:
        self.waited = True
        return 0


class FakePopen:
    """Stand-in for ``subprocess.Popen`` that keeps every spawned process."""

    def __init__(self, fail_after: int | None = None, returncode: int | None = None) -> None:
        self.processes: list[FakeProcess] = []
        self._fail_after = fail_after
        self._returncode = returncode

    def __call__(self, args: list[str], **kwargs: object) -> FakeProcess:
        process = FakeProcess(args, FakeStdin(self._fail_after), kwargs, self._returncode)
        self.processes.append(process)
        return process


@pytest.fixture
def fake_popen_factory() -> type[FakePopen]:
    """Build fakes with failure or exit behaviour set per test."""
    return FakePopen


@pytest.fixture
def fake_popen() -> FakePopen:
    return FakePopen()


class RecordingPopen:
    """Spawns real processes and keeps them so tests can wait on them."""

    def __init__(self) -> None:
        self.spawned: list[subprocess.Popen] = []

    def __call__(self, *args: Any, **kwargs: Any) -> subprocess.Popen:
        proc = subprocess.Popen(*args, **kwargs)
        self.spawned.append(proc)
        return proc


@pytest.fixture
def real_popen() -> Iterator[RecordingPopen]:
    recorder = RecordingPopen()
    yield recorder
    for proc in recorder.spawned:
        if proc.poll() is None:
            proc.kill()
        proc.wait(timeout=10)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "home" / "yscqCliOptions.json"
