"""Transition notifications handed back to the table's owner."""

from __future__ import annotations

from typing import Any, Callable

from procwarden.processes.entry import ProcessEntry
from procwarden.types import NotifyReason

NotifyCallback = Callable[[NotifyReason, ProcessEntry, Any], None]


class Notifier:
    """Invokes the caller's callback with its opaque user data.

    Callbacks run synchronously inside table operations and must not
    mutate the table.
    """

    def __init__(self, callback: NotifyCallback | None = None, user_data: Any = None) -> None:
        self._callback = callback
        self._user_data = user_data

    def executed(self, entry: ProcessEntry) -> None:
        self._fire(NotifyReason.EXECUTED, entry)

    def finished(self, entry: ProcessEntry) -> None:
        self._fire(NotifyReason.FINISHED, entry)

    def _fire(self, reason: NotifyReason, entry: ProcessEntry) -> None:
        if self._callback is not None:
            self._callback(reason, entry, self._user_data)
