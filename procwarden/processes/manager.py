"""ProcessList — the caller-facing bounded process supervisor.

Ties the table, launcher, reaper and kill-list escalator together behind
one object. Nothing here runs in the background: the caller polls
``waitpid()`` (or ``killall()``) to observe children exiting.

Usage:
    plist = ProcessList(10, use_process_group=True)
    plist.add("true", "/bin/true")
    plist.exec_initialized()
    while plist.summary_result_short() == Verdict.INDETERMINATE:
        plist.waitpid()
        time.sleep(0.05)
    plist.killall(timeout=2.0)
"""

from __future__ import annotations

import time
from typing import Any, Callable

from procwarden.processes.entry import ProcessEntry
from procwarden.processes.escalator import KillListEscalator, OsSignaller, Signaller
from procwarden.processes.launcher import Launcher, PosixSpawner, Spawner
from procwarden.processes.notify import Notifier, NotifyCallback
from procwarden.processes.reaper import ExitStatusSource, Reaper, WaitpidExitStatusSource
from procwarden.processes.summary import summary_result, summary_result_short
from procwarden.processes.table import ProcessTable
from procwarden.types import EntryState, Verdict


class ProcessList:
    """Bounded set of external commands with escalating termination.

    ``use_process_group`` decides whether each child leads its own process
    group; kill signals then reach the child's whole process tree.
    """

    def __init__(
        self,
        capacity: int,
        *,
        use_process_group: bool,
        notify: NotifyCallback | None = None,
        user_data: Any = None,
        spawner: Spawner | None = None,
        exit_source: ExitStatusSource | None = None,
        signaller: Signaller | None = None,
        poll_interval: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.use_process_group = use_process_group
        self._table = ProcessTable(capacity)
        notifier = Notifier(notify, user_data)
        self._launcher = Launcher(
            spawner or PosixSpawner(), notifier, use_process_group=use_process_group,
        )
        self._reaper = Reaper(exit_source or WaitpidExitStatusSource(), notifier)
        self._escalator = KillListEscalator(
            signaller or OsSignaller(),
            self._reaper,
            use_process_group=use_process_group,
            poll_interval=poll_interval,
            sleep=sleep,
            clock=clock,
        )

    # ── Table ────────────────────────────────────────────────────

    @property
    def capacity(self) -> int:
        return self._table.capacity

    @property
    def active(self) -> tuple[ProcessEntry, ...]:
        return self._table.active

    @property
    def kill_list(self) -> tuple[ProcessEntry, ...]:
        return self._table.kill_list

    def __len__(self) -> int:
        return len(self._table)

    def add(self, name: str, command: str) -> ProcessEntry:
        """Register a command; raises CapacityExceededError or InvalidCommandError."""
        return self._table.register(name, command)

    def close(self) -> None:
        """Forget every entry. Live processes are neither signalled nor waited for."""
        self._table.clear()

    # ── Lifecycle ────────────────────────────────────────────────

    def exec_initialized(self) -> int:
        return self._launcher.launch_all_initialized(self._table)

    def waitpid(self) -> int:
        return self._reaper.reap_available(self._table)

    def move_active_to_kill_list(self) -> int:
        return self._escalator.move_active_to_kill_list(self._table)

    def process_kill_list(self) -> bool:
        return self._escalator.process_kill_list(self._table)

    def killall(self, timeout: float) -> bool:
        return self._escalator.killall(self._table, timeout)

    # ── Queries ──────────────────────────────────────────────────

    def get_no_running(self) -> int:
        return sum(1 for e in self._table.active if e.state == EntryState.RUNNING)

    def get_kill_list_items(self) -> int:
        return len(self._table.kill_list)

    def summary_result(self) -> Verdict:
        return summary_result(self._table.active)

    def summary_result_short(self) -> Verdict:
        return summary_result_short(self._table.active)
