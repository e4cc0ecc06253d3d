"""Rich console reporter for evaluation runs.

Default mode prints one character per case as it completes (``.`` pass,
``F`` fail, ``E`` error). Trace mode prints one line per case with its
duration, plus reasoning or error text for failures. finalize() renders
a headline table, a per-category breakdown, and the failure and error
listings.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from evalcourt.models.result import CaseStatus, RunStatus
from evalcourt.reporting.base import BaseReporter

if TYPE_CHECKING:
    from evalcourt.models.result import CaseResult, RunSummary


# Status styling map: status -> (dot symbol, Rich markup style)
_STATUS_STYLES: dict[CaseStatus, tuple[str, str]] = {
    CaseStatus.passed: (".", "green"),
    CaseStatus.failed: ("F", "red"),
    CaseStatus.error: ("E", "yellow"),
}


def _format_duration(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def _failure_text(result: CaseResult) -> str:
    if result.error is not None:
        return f"{result.error.type}: {result.error.message}"
    if result.verdict is not None and result.verdict.reasoning:
        return result.verdict.reasoning
    return "(no reasoning provided)"


class ConsoleReporter(BaseReporter):
    """Reporter that renders progress and a summary with Rich.

    Args:
        console: Rich Console to write to (stdout by default).
        trace: Print one detailed line per case instead of dots.
    """

    def __init__(self, console: Console | None = None, trace: bool = False) -> None:
        self.console = console or Console()
        self.trace = trace
        self.total_cases = 0
        self.completed = 0

    def init(self, total_cases: int) -> None:
        self.total_cases = total_cases
        self.completed = 0
        noun = "case" if total_cases == 1 else "cases"
        self.console.print(f"[bold]Running {total_cases} evaluation {noun}[/bold]")
        if not self.trace:
            self.console.print()

    def report_result(self, result: CaseResult) -> None:
        self.completed += 1
        symbol, style = _STATUS_STYLES[result.status]
        if not self.trace:
            self.console.print(f"[{style}]{symbol}[/{style}]", end="")
            return

        duration = _format_duration(result.duration_seconds)
        label = escape(result.case.label())
        self.console.print(
            f"  [{style}]{symbol}[/{style}] {label} [{style}]({duration})[/{style}]"
        )
        if result.status != CaseStatus.passed:
            heading = "Error" if result.status == CaseStatus.error else "Failure"
            self.console.print(f"     [{style}]{heading}:[/{style}] {escape(_failure_text(result))}")

    def finalize(self, summary: RunSummary) -> None:
        if not self.trace:
            self.console.print()
        self.console.print()

        if summary.status == RunStatus.failed:
            self.console.print(f"[bold red]Run failed:[/bold red] {escape(summary.error or 'unknown error')}")
            self.console.print()

        self._render_listing(summary, CaseStatus.failed, "Failures", "red")
        self._render_listing(summary, CaseStatus.error, "Errors", "yellow")
        render_headline(summary, self.console)
        render_categories(summary, self.console)

    def _render_listing(
        self,
        summary: RunSummary,
        status: CaseStatus,
        title: str,
        style: str,
    ) -> None:
        matching = [r for r in summary.results if r.status == status]
        if not matching or self.trace:
            return
        self.console.print(f"[bold]{title}[/bold]")
        for index, result in enumerate(matching, 1):
            prefix = f"{result.dataset}: " if result.dataset else ""
            self.console.print(f"  {index}) {escape(prefix + result.case.label())}")
            if result.case.category:
                self.console.print(f"     Category: {escape(result.case.category)}")
            self.console.print(f"     [{style}]{escape(_failure_text(result))}[/{style}]")
        self.console.print()


def render_headline(summary: RunSummary, console: Console) -> None:
    """Render a compact key-value table with counts and latency."""
    metrics = summary.metrics
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    if summary.status == RunStatus.completed:
        status_cell = "[bold green]completed[/bold green]"
    else:
        status_cell = "[bold red]failed[/bold red]"
    table.add_row("Status", status_cell)
    table.add_row(
        "Cases",
        f"{metrics.passed}/{metrics.total} passed ({metrics.pass_rate:.0%})",
    )

    if metrics.failed > 0 or metrics.errored > 0:
        table.add_row(
            "Problems",
            f"[red]{metrics.failed} failed[/red], [yellow]{metrics.errored} errored[/yellow]",
        )

    if metrics.latency_p50 is not None and metrics.latency_p95 is not None:
        table.add_row(
            "Latency",
            f"p50={metrics.latency_p50:.2f}s p95={metrics.latency_p95:.2f}s",
        )

    table.add_row("Duration", f"{summary.duration_seconds:.2f}s")
    console.print(table)


def render_categories(summary: RunSummary, console: Console) -> None:
    """Render a per-category breakdown when more than one category ran."""
    breakdown = summary.metrics.by_category
    if len(breakdown) < 2:
        return

    table = Table(box=box.SIMPLE, title="By category")
    table.add_column("Category", style="bold")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Pass rate", justify="right")
    for name, cm in breakdown.items():
        table.add_row(
            escape(name),
            str(cm.passed),
            str(cm.failed),
            str(cm.errored),
            f"{cm.pass_rate:.0%}",
        )
    console.print(table)


def output_json(summary: RunSummary) -> None:
    """Write the summary as pure JSON to stdout.

    No Rich markup, no color, no extra text. Suitable for
    CI pipeline consumption and machine parsing.
    """
    sys.stdout.write(summary.to_json())
    sys.stdout.write("\n")
