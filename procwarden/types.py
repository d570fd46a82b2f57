"""Core types shared across procwarden subsystems."""

from __future__ import annotations

import os
import signal
from dataclasses import dataclass
from enum import Enum


# ── Entry States ─────────────────────────────────────────────────────────────


class EntryState(str, Enum):
    INITIALIZED = "initialized"
    RUNNING = "running"
    FINISHED = "finished"


class NotifyReason(str, Enum):
    EXECUTED = "executed"
    FINISHED = "finished"


# ── Outcomes ─────────────────────────────────────────────────────────────────


class ExitKind(str, Enum):
    SUCCESS = "success"
    EXIT_FAILURE = "exit_failure"
    SIGNALED = "signaled"
    LAUNCH_FAILURE = "launch_failure"


class Verdict(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class ExitResult:
    """How a finished entry ended."""

    kind: ExitKind
    status: int | None = None  # raw wait status, None for launch failures
    exit_code: int | None = None
    signal: int | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.kind == ExitKind.SUCCESS

    @classmethod
    def from_wait_status(cls, status: int) -> ExitResult:
        if os.WIFSIGNALED(status):
            return cls(kind=ExitKind.SIGNALED, status=status, signal=os.WTERMSIG(status))
        code = os.WEXITSTATUS(status) if os.WIFEXITED(status) else None
        kind = ExitKind.SUCCESS if code == 0 else ExitKind.EXIT_FAILURE
        return cls(kind=kind, status=status, exit_code=code)

    @classmethod
    def launch_failure(cls, error: str) -> ExitResult:
        return cls(kind=ExitKind.LAUNCH_FAILURE, error=error)

    def describe(self) -> str:
        if self.kind == ExitKind.SIGNALED and self.signal is not None:
            try:
                return f"killed by {signal.Signals(self.signal).name}"
            except ValueError:
                return f"killed by signal {self.signal}"
        if self.kind == ExitKind.LAUNCH_FAILURE:
            return f"launch failed: {self.error}"
        return f"exit {self.exit_code}"
