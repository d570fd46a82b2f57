"""HealthCheckRunner — drives a ProcessList from an asyncio event loop.

The process list itself never blocks or spawns background work; this
runner supplies the polling cadence, the overall time budget and the
clean-up of whatever is still running once the verdict is known.

Usage:
    runner = HealthCheckRunner(RunnerConfig(timeout=10))
    report = await runner.run([
        CheckSpec(name="disk", command="/usr/local/bin/check-disk"),
        CheckSpec(name="net", command='ping -c 1 "gateway"'),
    ])
    if not report.passed:
        ...
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Sequence

from procwarden.config import VerdictMode
from procwarden.healthcheck.models import CheckOutcome, CheckReport, CheckSpec, RunnerConfig
from procwarden.processes.entry import ProcessEntry
from procwarden.processes.manager import ProcessList
from procwarden.types import NotifyReason, Verdict

_logger = logging.getLogger(__name__)

ProcessListFactory = Callable[..., ProcessList]


class HealthCheckRunner:
    """Runs a battery of checks and reduces them to a single verdict."""

    def __init__(
        self,
        config: RunnerConfig | None = None,
        process_list_factory: ProcessListFactory = ProcessList,
    ) -> None:
        self._config = config or RunnerConfig()
        self._factory = process_list_factory

    @property
    def config(self) -> RunnerConfig:
        return self._config

    async def run(self, checks: Sequence[CheckSpec]) -> CheckReport:
        """Run every check; registration errors surface before anything starts."""
        cfg = self._config
        counts = {NotifyReason.EXECUTED: 0, NotifyReason.FINISHED: 0}

        def _on_transition(reason: NotifyReason, entry: ProcessEntry, _: Any) -> None:
            counts[reason] += 1
            if reason == NotifyReason.FINISHED and entry.exit_result is not None:
                _logger.info("Check %r finished: %s", entry.name, entry.exit_result.describe())

        plist = self._factory(
            cfg.capacity,
            use_process_group=cfg.use_process_group,
            notify=_on_transition,
            poll_interval=cfg.poll_interval,
        )
        entries = [plist.add(check.name, check.command) for check in checks]

        start = time.monotonic()
        deadline = start + cfg.timeout
        plist.exec_initialized()
        verdict = self._verdict(plist)
        timed_out = False

        try:
            while verdict == Verdict.INDETERMINATE:
                if time.monotonic() >= deadline:
                    timed_out = True
                    _logger.warning("Health check timed out after %.1fs", cfg.timeout)
                    break
                await asyncio.sleep(cfg.poll_interval)
                plist.waitpid()
                verdict = self._verdict(plist)
        finally:
            # Reclaim leftovers on every exit path, including errors and cancellation
            pending = sum(1 for e in entries if not e.finished)
            try:
                if pending:
                    _logger.info("Reclaiming %d unfinished checks", pending)
                    await asyncio.shield(asyncio.to_thread(plist.killall, cfg.kill_timeout))
            finally:
                plist.close()

        if timed_out:
            verdict = Verdict.FAILURE

        return CheckReport(
            verdict=verdict,
            outcomes=[CheckOutcome.from_entry(e) for e in entries],
            timed_out=timed_out,
            killed=pending,
            executed=counts[NotifyReason.EXECUTED],
            finished=counts[NotifyReason.FINISHED],
            duration_s=round(time.monotonic() - start, 3),
        )

    def run_sync(self, checks: Sequence[CheckSpec]) -> CheckReport:
        return asyncio.run(self.run(checks))

    def _verdict(self, plist: ProcessList) -> Verdict:
        if self._config.mode == VerdictMode.FULL:
            return plist.summary_result()
        return plist.summary_result_short()
