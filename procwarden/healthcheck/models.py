"""Data models for health-check runs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from procwarden.config import ProcwardenSettings, VerdictMode, settings
from procwarden.processes.entry import ProcessEntry
from procwarden.types import EntryState, ExitKind, Verdict


class CheckSpec(BaseModel):
    """One command to run as part of a health check."""

    name: str
    command: str


class RunnerConfig(BaseModel):
    """Limits and pacing for a HealthCheckRunner."""

    capacity: int = Field(default=32, ge=1)
    use_process_group: bool = True
    timeout: float = Field(default=30.0, ge=0)
    kill_timeout: float = Field(default=5.0, ge=0)
    poll_interval: float = Field(default=0.05, gt=0)
    mode: VerdictMode = VerdictMode.SHORT

    @classmethod
    def from_settings(cls, source: ProcwardenSettings = settings, **overrides) -> RunnerConfig:
        values = {
            "capacity": source.capacity,
            "use_process_group": source.use_process_group,
            "timeout": source.check_timeout,
            "kill_timeout": source.kill_timeout,
            "poll_interval": source.poll_interval,
            "mode": source.verdict_mode,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class CheckOutcome(BaseModel):
    name: str
    command: str
    argv: list[str]
    state: EntryState
    pid: int | None = None
    exit_kind: ExitKind | None = None
    exit_code: int | None = None
    signal: int | None = None
    detail: str = ""

    @classmethod
    def from_entry(cls, entry: ProcessEntry) -> CheckOutcome:
        result = entry.exit_result
        return cls(
            name=entry.name,
            command=entry.command,
            argv=list(entry.argv),
            state=entry.state,
            pid=entry.pid,
            exit_kind=result.kind if result else None,
            exit_code=result.exit_code if result else None,
            signal=result.signal if result else None,
            detail=result.describe() if result else entry.state.value,
        )


class CheckReport(BaseModel):
    """Result of one health-check run."""

    verdict: Verdict
    outcomes: list[CheckOutcome] = Field(default_factory=list)
    timed_out: bool = False
    killed: int = 0  # checks still running when the verdict was reached
    executed: int = 0
    finished: int = 0
    duration_s: float = 0.0

    @property
    def passed(self) -> bool:
        return self.verdict == Verdict.SUCCESS
