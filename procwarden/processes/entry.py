"""Process entry — one registered command and its lifecycle state."""

from __future__ import annotations

from dataclasses import dataclass, field

from procwarden.exceptions import EntryStateError
from procwarden.types import EntryState, ExitResult

# Entries only ever move forward
VALID_TRANSITIONS: dict[EntryState, set[EntryState]] = {
    EntryState.INITIALIZED: {EntryState.RUNNING, EntryState.FINISHED},
    EntryState.RUNNING: {EntryState.FINISHED},
    EntryState.FINISHED: set(),  # terminal
}


@dataclass(eq=False)
class ProcessEntry:
    """Tracks one command owned by a ProcessTable.

    Callers get a reference back from registration and may read it freely,
    but only the table and its collaborators mutate it.
    """

    name: str
    command: str
    argv: list[str]
    state: EntryState = EntryState.INITIALIZED
    pid: int | None = None
    exit_result: ExitResult | None = None
    # Kill-list bookkeeping: index into the escalation signal table
    escalation_level: int = 0
    signals_sent: list[int] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.state == EntryState.FINISHED

    @property
    def running(self) -> bool:
        return self.state == EntryState.RUNNING

    @property
    def succeeded(self) -> bool:
        return self.exit_result is not None and self.exit_result.success

    def mark_running(self, pid: int) -> None:
        self._transition(EntryState.RUNNING)
        self.pid = pid

    def mark_finished(self, result: ExitResult) -> None:
        self._transition(EntryState.FINISHED)
        self.exit_result = result

    def _transition(self, target: EntryState) -> None:
        if target not in VALID_TRANSITIONS[self.state]:
            raise EntryStateError(
                f"Cannot transition entry {self.name!r} "
                f"from {self.state.value} to {target.value}"
            )
        self.state = target

    def __repr__(self) -> str:
        return (
            f"ProcessEntry(name={self.name!r}, state={self.state.value}, "
            f"pid={self.pid}, argv={self.argv!r})"
        )
