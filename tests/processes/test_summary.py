"""Tests for full and short-circuit verdicts."""

from procwarden.processes.entry import ProcessEntry
from procwarden.processes.summary import summary_result, summary_result_short
from procwarden.types import ExitResult, Verdict

OK = 0
FAIL = 1 << 8


def _entry(status=None, running=True):
    entry = ProcessEntry(name="e", command="x", argv=["x"])
    if running or status is not None:
        entry.mark_running(1)
    if status is not None:
        entry.mark_finished(ExitResult.from_wait_status(status))
    return entry


def test_empty_set_is_success():
    assert summary_result([]) == Verdict.SUCCESS
    assert summary_result_short([]) == Verdict.SUCCESS


def test_all_succeeded():
    entries = [_entry(OK), _entry(OK), _entry(OK)]
    assert summary_result(entries) == Verdict.SUCCESS
    assert summary_result_short(entries) == Verdict.SUCCESS


def test_one_failed_all_finished():
    entries = [_entry(OK), _entry(FAIL)]
    assert summary_result(entries) == Verdict.FAILURE
    assert summary_result_short(entries) == Verdict.FAILURE


def test_launch_failure_is_failure():
    entry = ProcessEntry(name="e", command="x", argv=["x"])
    entry.mark_finished(ExitResult.launch_failure("nope"))
    assert summary_result([entry, _entry(OK)]) == Verdict.FAILURE


def test_running_without_failures_is_indeterminate():
    entries = [_entry(OK), _entry()]
    assert summary_result(entries) == Verdict.INDETERMINATE
    assert summary_result_short(entries) == Verdict.INDETERMINATE


def test_short_form_reports_known_failure_immediately():
    entries = [_entry(OK), _entry(FAIL), _entry()]
    assert summary_result(entries) == Verdict.INDETERMINATE
    assert summary_result_short(entries) == Verdict.FAILURE


def test_failure_after_running_entry_still_short_circuits():
    entries = [_entry(), _entry(FAIL)]
    assert summary_result_short(entries) == Verdict.FAILURE


def test_initialized_entry_is_indeterminate():
    entries = [_entry(OK), _entry(running=False)]
    assert summary_result(entries) == Verdict.INDETERMINATE
    assert summary_result_short(entries) == Verdict.INDETERMINATE
