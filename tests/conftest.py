"""Shared test fixtures — fake OS collaborators for the process list.

The fakes stand in for process creation, waitpid and kill so the table
logic can be exercised without spawning anything.
"""

from __future__ import annotations

import os
import shutil
import signal
import time

import pytest

from procwarden.exceptions import KillSignalError, LaunchFailureError
from procwarden.processes.manager import ProcessList


class FakeSpawner:
    """Hands out increasing pids; programs listed in ``missing`` fail to launch."""

    def __init__(self, missing: set[str] | None = None):
        self.missing = missing or set()
        self.calls: list[tuple[list[str], bool]] = []
        self._next_pid = 1000

    def spawn(self, argv, *, new_process_group):
        self.calls.append((list(argv), new_process_group))
        if argv[0] in self.missing:
            raise LaunchFailureError(f"{argv[0]}: No such file or directory")
        self._next_pid += 1
        return self._next_pid


class FakeExitSource:
    """Exit statuses are queued by the test and handed out once, like waitpid."""

    def __init__(self):
        self._statuses: dict[int, int] = {}
        self.polls: list[int] = []
        self.error: Exception | None = None

    def exit(self, pid: int, code: int = 0) -> None:
        self._statuses[pid] = (code & 0xFF) << 8

    def signal(self, pid: int, sig: int) -> None:
        self._statuses[pid] = int(sig)

    def poll(self, pid):
        self.polls.append(pid)
        if self.error is not None:
            raise self.error
        return self._statuses.pop(pid, None)


class FakeSignaller:
    """Records signals; a signal kills the pid unless it is listed as ignored."""

    def __init__(self, source: FakeExitSource):
        self._source = source
        self.sent: list[tuple[int, int, bool]] = []
        self.ignored: dict[int, set[int]] = {}
        self.gone: set[int] = set()
        self.dead: set[int] = set()

    def send(self, pid, sig, *, process_group):
        self.sent.append((pid, int(sig), process_group))
        if pid in self.gone:
            raise KillSignalError(f"Cannot signal pid {pid}: No such process")
        if int(sig) in self.ignored.get(pid, set()) or pid in self.dead:
            return
        self.dead.add(pid)
        self._source.signal(pid, sig)


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class NotifyRecorder:
    """Notification callback that remembers every call."""

    def __init__(self):
        self.events: list[tuple[str, str, str]] = []
        self.user_data: list[object] = []

    def __call__(self, reason, entry, user_data):
        self.events.append((reason.value, entry.name, entry.state.value))
        self.user_data.append(user_data)

    def count(self, reason: str) -> int:
        return sum(1 for r, _, _ in self.events if r == reason)


@pytest.fixture
def spawner():
    return FakeSpawner(missing={"/nonexistingdir/nonexistingfile"})


@pytest.fixture
def exit_source():
    return FakeExitSource()


@pytest.fixture
def signaller(exit_source):
    return FakeSignaller(exit_source)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return NotifyRecorder()


@pytest.fixture
def make_plist(spawner, exit_source, signaller, clock, recorder):
    """Factory for ProcessList instances wired to the fakes."""
    def _factory(capacity: int = 10, use_process_group: bool = True) -> ProcessList:
        return ProcessList(
            capacity,
            use_process_group=use_process_group,
            notify=recorder,
            user_data=0x42,
            spawner=spawner,
            exit_source=exit_source,
            signaller=signaller,
            poll_interval=0.1,
            sleep=clock.sleep,
            clock=clock,
        )
    return _factory


# ── Real process helpers ────────────────────────────────────────


def find_exec_path(name: str) -> str | None:
    for directory in ("/bin", "/usr/bin"):
        path = os.path.join(directory, name)
        if os.path.isfile(path) and os.access(path, os.X_OK):
            return path
    return shutil.which(name)


@pytest.fixture
def true_path():
    path = find_exec_path("true")
    if path is None:
        pytest.skip("true not available")
    return path


@pytest.fixture
def false_path():
    path = find_exec_path("false")
    if path is None:
        pytest.skip("false not available")
    return path


@pytest.fixture
def wait_for():
    """Poll ``plist.waitpid()`` until the counts match or ten seconds pass."""
    def _wait(plist: ProcessList, running: int, kill_items: int, timeout: float = 10.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            plist.waitpid()
            if plist.get_no_running() == running and plist.get_kill_list_items() == kill_items:
                return True
            time.sleep(0.01)
        return False
    return _wait


@pytest.fixture
def wait_for_file():
    def _wait(path, timeout: float = 10.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if os.path.exists(path):
                return True
            time.sleep(0.01)
        return False
    return _wait


@pytest.fixture(autouse=True)
def _default_sigchld():
    # waitpid needs SIGCHLD at its default disposition to see exit statuses
    if not hasattr(signal, "SIGCHLD"):
        yield
        return
    previous = signal.signal(signal.SIGCHLD, signal.SIG_DFL)
    yield
    signal.signal(signal.SIGCHLD, previous)
