"""Process table — bounded storage for entries across two regions.

The active region holds entries awaiting the caller's disposition; the
kill region holds entries that were handed over for termination. Both
draw from a single capacity budget, and only removal gives a slot back.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator

from procwarden.exceptions import CapacityExceededError, ProcwardenError
from procwarden.processes.entry import ProcessEntry
from procwarden.processes.tokenizer import tokenize

_logger = logging.getLogger(__name__)


class Region(str, Enum):
    ACTIVE = "active"
    KILL_LIST = "kill_list"


class ProcessTable:
    """Fixed-capacity collection of ProcessEntry records."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._active: list[ProcessEntry] = []
        self._kill_list: list[ProcessEntry] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def active(self) -> tuple[ProcessEntry, ...]:
        return tuple(self._active)

    @property
    def kill_list(self) -> tuple[ProcessEntry, ...]:
        return tuple(self._kill_list)

    @property
    def free_slots(self) -> int:
        return self._capacity - len(self)

    def __len__(self) -> int:
        return len(self._active) + len(self._kill_list)

    def __iter__(self) -> Iterator[ProcessEntry]:
        yield from self._active
        yield from self._kill_list

    def register(self, name: str, command: str) -> ProcessEntry:
        """Append a new INITIALIZED entry to the active region."""
        if len(self) >= self._capacity:
            raise CapacityExceededError(
                f"Process table full ({self._capacity} entries), cannot add {name!r}"
            )
        entry = ProcessEntry(name=name, command=command, argv=tokenize(command))
        self._active.append(entry)
        _logger.debug("Registered %r as %s", name, entry.argv)
        return entry

    def region_of(self, entry: ProcessEntry) -> Region | None:
        # ProcessEntry compares by identity, so membership tests are exact
        if entry in self._active:
            return Region.ACTIVE
        if entry in self._kill_list:
            return Region.KILL_LIST
        return None

    def transfer_to_kill_list(self, entry: ProcessEntry) -> None:
        """Move an active entry to the end of the kill list, keeping its slot."""
        if entry not in self._active:
            raise ProcwardenError(f"Entry {entry.name!r} is not in the active region")
        self._active.remove(entry)
        self._kill_list.append(entry)

    def remove(self, entry: ProcessEntry) -> None:
        """Drop an entry from whichever region holds it, freeing its slot."""
        for region in (self._active, self._kill_list):
            if entry in region:
                region.remove(entry)
                return
        raise ProcwardenError(f"Entry {entry.name!r} is not in the table")

    def clear(self) -> None:
        self._active.clear()
        self._kill_list.clear()
