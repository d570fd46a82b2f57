"""Aggregate pass/fail verdicts over a set of entries."""

from __future__ import annotations

from typing import Iterable

from procwarden.processes.entry import ProcessEntry
from procwarden.types import Verdict


def summary_result(entries: Iterable[ProcessEntry]) -> Verdict:
    """Full verdict: withholds judgment until every entry has finished."""
    failed = False
    for entry in entries:
        if not entry.finished:
            return Verdict.INDETERMINATE
        if not entry.succeeded:
            failed = True
    return Verdict.FAILURE if failed else Verdict.SUCCESS


def summary_result_short(entries: Iterable[ProcessEntry]) -> Verdict:
    """Short-circuit verdict: any known failure decides the result at once."""
    pending = False
    for entry in entries:
        if not entry.finished:
            pending = True
        elif not entry.succeeded:
            return Verdict.FAILURE
    return Verdict.INDETERMINATE if pending else Verdict.SUCCESS
