"""procwarden CLI — run health-check commands from the shell.

`procwarden run CMD...` runs every command as one health check and exits
0 on success, 1 on failure and 2 when no verdict could be reached.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from procwarden.config import VerdictMode, settings
from procwarden.exceptions import CapacityExceededError, InvalidCommandError
from procwarden.healthcheck.models import CheckReport, CheckSpec, RunnerConfig
from procwarden.healthcheck.runner import HealthCheckRunner
from procwarden.processes.tokenizer import tokenize
from procwarden.types import ExitKind, Verdict

console = Console()

EXIT_CODES = {
    Verdict.SUCCESS: 0,
    Verdict.FAILURE: 1,
    Verdict.INDETERMINATE: 2,
}

_KIND_STYLES = {
    ExitKind.SUCCESS: "green",
    ExitKind.EXIT_FAILURE: "red",
    ExitKind.SIGNALED: "yellow",
    ExitKind.LAUNCH_FAILURE: "red",
}

app = typer.Typer(
    name="procwarden",
    help="procwarden -- run a battery of commands and decide pass/fail.",
    no_args_is_help=True,
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _check_names(commands: list[str], names: list[str]) -> list[str]:
    resolved = []
    for i, command in enumerate(commands):
        if i < len(names):
            resolved.append(names[i])
        else:
            program = tokenize(command)[0]
            resolved.append(f"{os.path.basename(program)}#{i + 1}")
    return resolved


def _render(report: CheckReport) -> None:
    table = Table(title="Health check")
    table.add_column("Check", style="cyan")
    table.add_column("PID", style="dim", justify="right")
    table.add_column("Outcome")
    table.add_column("Command", style="white", max_width=60)

    for outcome in report.outcomes:
        style = _KIND_STYLES.get(outcome.exit_kind, "dim")
        table.add_row(
            escape(outcome.name),
            str(outcome.pid) if outcome.pid is not None else "-",
            f"[{style}]{escape(outcome.detail)}[/{style}]",
            escape(outcome.command),
        )
    console.print(table)

    colour = {"success": "green", "failure": "red"}.get(report.verdict.value, "yellow")
    summary = f"[bold {colour}]{report.verdict.value.upper()}[/bold {colour}] in {report.duration_s:.2f}s"
    if report.timed_out:
        summary += " [yellow](timed out)[/yellow]"
    if report.killed:
        summary += f" [dim]{report.killed} killed[/dim]"
    console.print(summary)


@app.command("run")
def run(
    commands: list[str] = typer.Argument(help="Commands to run, one check each"),
    names: Optional[list[str]] = typer.Option(None, "--name", "-n", help="Check names, in order"),
    timeout: float = typer.Option(settings.check_timeout, "--timeout", "-t", help="Seconds before giving up"),
    kill_timeout: float = typer.Option(settings.kill_timeout, "--kill-timeout", help="Seconds allowed for killing leftovers"),
    mode: VerdictMode = typer.Option(settings.verdict_mode, "--mode", "-m", help="short: fail fast, full: wait for all"),
    capacity: int = typer.Option(settings.capacity, "--capacity", help="Maximum simultaneous checks"),
    process_group: bool = typer.Option(
        settings.use_process_group, "--process-group/--no-process-group",
        help="Run each check in its own process group",
    ),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level"),
):
    """Run COMMANDS concurrently and report a combined verdict."""
    _configure_logging(log_level)
    config = RunnerConfig.from_settings(
        capacity=capacity,
        use_process_group=process_group,
        timeout=timeout,
        kill_timeout=kill_timeout,
        mode=mode,
    )
    try:
        checks = [
            CheckSpec(name=name, command=command)
            for name, command in zip(_check_names(commands, names or []), commands)
        ]
        report = HealthCheckRunner(config).run_sync(checks)
    except (InvalidCommandError, CapacityExceededError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=EXIT_CODES[Verdict.INDETERMINATE])

    _render(report)
    raise typer.Exit(code=EXIT_CODES[report.verdict])


@app.command("tokenize")
def tokenize_command(
    command: str = typer.Argument(help="Command string to split"),
):
    """Show the argument vector COMMAND would be executed with."""
    try:
        argv = tokenize(command)
    except InvalidCommandError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)
    for i, arg in enumerate(argv):
        console.print(f"[dim]{i}[/dim] {escape(arg)}", highlight=False)


@app.command("version")
def version():
    """Show the installed procwarden version."""
    from procwarden import __version__
    console.print(f"procwarden {__version__}")
