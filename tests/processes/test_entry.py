"""Tests for the process entry state machine."""

import signal

import pytest

from procwarden.exceptions import EntryStateError
from procwarden.processes.entry import ProcessEntry
from procwarden.types import EntryState, ExitKind, ExitResult


def _entry():
    return ProcessEntry(name="check", command="/bin/true", argv=["/bin/true"])


def test_initial_state():
    entry = _entry()
    assert entry.state == EntryState.INITIALIZED
    assert entry.pid is None
    assert entry.exit_result is None
    assert entry.escalation_level == 0


def test_running_then_finished():
    entry = _entry()
    entry.mark_running(1234)
    assert entry.running
    assert entry.pid == 1234
    entry.mark_finished(ExitResult.from_wait_status(0))
    assert entry.finished
    assert entry.succeeded


def test_launch_failure_finishes_directly():
    entry = _entry()
    entry.mark_finished(ExitResult.launch_failure("no such file"))
    assert entry.finished
    assert not entry.succeeded
    assert entry.exit_result.kind == ExitKind.LAUNCH_FAILURE


def test_finished_is_terminal():
    entry = _entry()
    entry.mark_running(1)
    entry.mark_finished(ExitResult.from_wait_status(0))
    with pytest.raises(EntryStateError):
        entry.mark_running(2)
    with pytest.raises(EntryStateError):
        entry.mark_finished(ExitResult.from_wait_status(0))


def test_running_cannot_restart():
    entry = _entry()
    entry.mark_running(1)
    with pytest.raises(EntryStateError):
        entry.mark_running(2)


def test_entries_compare_by_identity():
    assert _entry() != _entry()


# ── ExitResult classification ───────────────────────────────────


def test_exit_zero_is_success():
    result = ExitResult.from_wait_status(0)
    assert result.kind == ExitKind.SUCCESS
    assert result.exit_code == 0
    assert result.describe() == "exit 0"


def test_nonzero_exit_is_failure():
    result = ExitResult.from_wait_status(1 << 8)
    assert result.kind == ExitKind.EXIT_FAILURE
    assert result.exit_code == 1
    assert not result.success


def test_signal_is_failure():
    result = ExitResult.from_wait_status(int(signal.SIGKILL))
    assert result.kind == ExitKind.SIGNALED
    assert result.signal == signal.SIGKILL
    assert result.describe() == "killed by SIGKILL"


def test_launch_failure_description():
    result = ExitResult.launch_failure("/nope: No such file or directory")
    assert result.status is None
    assert "launch failed" in result.describe()
