"""Kill-list escalation — reclaiming commands that will not finish.

Entries handed to the kill list receive one signal per escalation step,
each less polite than the last, until the reaper sees them exit.
"""

from __future__ import annotations

import logging
import os
import signal
import time
from typing import Callable, Protocol

from procwarden.exceptions import KillSignalError
from procwarden.processes.entry import ProcessEntry
from procwarden.processes.reaper import Reaper
from procwarden.processes.table import ProcessTable
from procwarden.types import EntryState

_logger = logging.getLogger(__name__)

# Escalation level -> signal; the last one repeats for every further step
ESCALATION_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGKILL)


def signal_for_level(level: int) -> signal.Signals:
    return ESCALATION_SIGNALS[min(level, len(ESCALATION_SIGNALS) - 1)]


class Signaller(Protocol):
    def send(self, pid: int, sig: int, *, process_group: bool) -> None:
        """Deliver ``sig``; raise KillSignalError if it could not be delivered."""
        ...


class OsSignaller:
    """Signals a child, or its whole process group, via os.kill/os.killpg."""

    def send(self, pid: int, sig: int, *, process_group: bool) -> None:
        try:
            if process_group:
                os.killpg(pid, sig)
            else:
                os.kill(pid, sig)
        except (ProcessLookupError, PermissionError) as e:
            raise KillSignalError(f"Cannot signal pid {pid}: {e.strerror}") from e


class KillListEscalator:
    """Drives kill-list entries through the escalation table."""

    def __init__(
        self,
        signaller: Signaller,
        reaper: Reaper,
        *,
        use_process_group: bool,
        poll_interval: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._signaller = signaller
        self._reaper = reaper
        self._use_process_group = use_process_group
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def move_active_to_kill_list(self, table: ProcessTable) -> int:
        """Drop finished entries and hand unfinished ones to the kill list.

        Returns the number of entries moved.
        """
        moved = 0
        for entry in table.active:
            if entry.state == EntryState.FINISHED:
                table.remove(entry)
            else:
                table.transfer_to_kill_list(entry)
                moved += 1
        if moved:
            _logger.debug("Moved %d entries to the kill list", moved)
        return moved

    def process_kill_list(self, table: ProcessTable) -> bool:
        """Apply one escalation step to every live kill-list entry."""
        for entry in table.kill_list:
            if entry.state == EntryState.INITIALIZED:
                # Never launched, nothing to signal
                table.remove(entry)
            elif entry.state == EntryState.FINISHED:
                table.remove(entry)
            else:
                self._signal(entry)

        self._reaper.reap_available(table, kill_list_only=True)
        return True

    def killall(self, table: ProcessTable, timeout: float) -> bool:
        """Move everything to the kill list and escalate until empty or out of time.

        The budget is split evenly between escalation levels so the polite
        signals get a fair chance before the final one. Returns True when
        the kill list is empty on return.
        """
        self.move_active_to_kill_list(table)
        deadline = self._clock() + timeout
        step_budget = timeout / len(ESCALATION_SIGNALS)

        while table.kill_list:
            self.process_kill_list(table)
            step_deadline = min(self._clock() + step_budget, deadline)
            while table.kill_list:
                remaining = step_deadline - self._clock()
                if remaining <= 0:
                    break
                self._sleep(min(self._poll_interval, remaining))
                self._reaper.reap_available(table, kill_list_only=True)
            if self._clock() >= deadline:
                break

        if table.kill_list:
            _logger.warning(
                "%d entries survived killall after %.1fs", len(table.kill_list), timeout,
            )
        return not table.kill_list

    def _signal(self, entry: ProcessEntry) -> None:
        sig = signal_for_level(entry.escalation_level)
        try:
            self._signaller.send(entry.pid, sig, process_group=self._use_process_group)
        except KillSignalError as e:
            # Already gone; the reaper will collect it
            _logger.debug("Signal %s to %r not delivered: %s", sig.name, entry.name, e)
        else:
            _logger.debug(
                "Sent %s to %r (pid %d, level %d)",
                sig.name, entry.name, entry.pid, entry.escalation_level,
            )
        entry.signals_sent.append(int(sig))
        entry.escalation_level += 1
