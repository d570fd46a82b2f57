"""Reaper — non-blocking collection of child exit statuses.

Exit statuses arrive whenever the OS decides; the reaper only ever asks
for them without waiting, so callers drive progress by polling.
"""

from __future__ import annotations

import errno
import logging
import os
from typing import Protocol

from procwarden.exceptions import ReapQueryError
from procwarden.processes.notify import Notifier
from procwarden.processes.table import ProcessTable, Region
from procwarden.types import EntryState, ExitResult

_logger = logging.getLogger(__name__)


class ExitStatusSource(Protocol):
    def poll(self, pid: int) -> int | None:
        """Return the raw wait status if ``pid`` has exited, else None."""
        ...


class WaitpidExitStatusSource:
    """Queries children with ``waitpid(pid, WNOHANG)``."""

    def poll(self, pid: int) -> int | None:
        while True:
            try:
                reaped, status = os.waitpid(pid, os.WNOHANG)
            except InterruptedError:
                continue
            except OSError as e:
                raise ReapQueryError(
                    f"waitpid({pid}) failed: {errno.errorcode.get(e.errno, e.errno)}"
                ) from e
            if reaped == 0:
                return None
            return status


class Reaper:
    """Moves RUNNING entries to FINISHED once their process has exited."""

    def __init__(self, source: ExitStatusSource, notifier: Notifier) -> None:
        self._source = source
        self._notifier = notifier

    def reap_available(self, table: ProcessTable, *, kill_list_only: bool = False) -> int:
        """Sweep running entries once; returns how many were reaped.

        Reaped kill-list entries leave the table immediately. Reaped active
        entries stay put until the caller disposes of them.
        """
        entries = table.kill_list if kill_list_only else tuple(table)
        reaped = 0
        for entry in entries:
            if entry.state != EntryState.RUNNING:
                continue
            status = self._source.poll(entry.pid)
            if status is None:
                continue

            result = ExitResult.from_wait_status(status)
            entry.mark_finished(result)
            reaped += 1
            _logger.debug("Reaped %r (pid %d): %s", entry.name, entry.pid, result.describe())
            self._notifier.finished(entry)

            if table.region_of(entry) == Region.KILL_LIST:
                table.remove(entry)
        return reaped
