"""Launcher — turns INITIALIZED entries into running OS processes."""

from __future__ import annotations

import logging
import os
import signal
from typing import Protocol, Sequence

from procwarden.exceptions import LaunchFailureError
from procwarden.processes.notify import Notifier
from procwarden.processes.table import ProcessTable
from procwarden.types import EntryState, ExitResult

_logger = logging.getLogger(__name__)

# Python ignores these itself; children must start with the defaults
_RESET_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGPIPE", "SIGXFZ", "SIGXFSZ") if hasattr(signal, name)
)


class Spawner(Protocol):
    def spawn(self, argv: Sequence[str], *, new_process_group: bool) -> int:
        """Start ``argv`` and return the child's pid, or raise LaunchFailureError."""
        ...


class PosixSpawner:
    """Creates children with posix_spawnp, searching PATH for argv[0]."""

    def spawn(self, argv: Sequence[str], *, new_process_group: bool) -> int:
        try:
            return os.posix_spawnp(
                argv[0],
                list(argv),
                os.environ,
                setpgroup=0 if new_process_group else None,
                setsigdef=_RESET_SIGNALS,
            )
        except OSError as e:
            raise LaunchFailureError(f"{argv[0]}: {e.strerror or e}") from e


class Launcher:
    """Dispatches every INITIALIZED entry in the active region."""

    def __init__(
        self,
        spawner: Spawner,
        notifier: Notifier,
        *,
        use_process_group: bool,
    ) -> None:
        self._spawner = spawner
        self._notifier = notifier
        self._use_process_group = use_process_group

    def launch_all_initialized(self, table: ProcessTable) -> int:
        """Spawn pending entries; returns how many were dispatched.

        A failed spawn is not an error here: the entry finishes at once with
        a launch-failure outcome and is reported as executed and finished.
        """
        dispatched = 0
        for entry in table.active:
            if entry.state != EntryState.INITIALIZED:
                continue
            dispatched += 1
            try:
                pid = self._spawner.spawn(
                    entry.argv, new_process_group=self._use_process_group,
                )
            except LaunchFailureError as e:
                _logger.warning("Failed to launch %r: %s", entry.name, e)
                entry.mark_finished(ExitResult.launch_failure(str(e)))
                self._notifier.executed(entry)
                self._notifier.finished(entry)
                continue

            entry.mark_running(pid)
            _logger.debug("Launched %r as pid %d", entry.name, pid)
            self._notifier.executed(entry)
        return dispatched
