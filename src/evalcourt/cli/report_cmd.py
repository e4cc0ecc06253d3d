"""evalcourt report -- display a stored run summary.

Shows the latest run by default, or a specific run by ID.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from evalcourt.models.config import find_project_root, load_project_config
from evalcourt.models.result import CaseStatus, RunSummary
from evalcourt.reporting.console import output_json, render_categories, render_headline
from evalcourt.storage.json_store import RunStore


def _render_run_detail(summary: RunSummary, console: Console) -> None:
    console.print()
    console.print(f"[bold]Run:[/bold] {summary.run_id}")
    console.print(f"[bold]Started:[/bold] {summary.started_at.isoformat()}")
    if summary.error:
        console.print(f"[bold red]Error:[/bold red] {escape(summary.error)}")

    render_headline(summary, console)
    render_categories(summary, console)

    problems = [r for r in summary.results if r.status != CaseStatus.passed]
    if not problems:
        console.print("[dim]No failed cases.[/dim]")
        return

    console.print("[bold]Failed cases[/bold]")
    for i, result in enumerate(problems, 1):
        if result.error is not None:
            detail = f"{result.error.type}: {result.error.message}"
        elif result.verdict is not None:
            detail = result.verdict.reasoning or "(no reasoning provided)"
        else:
            detail = ""
        console.print(f"  {i}. [{result.status.value}] {escape(result.case.label())}")
        if detail:
            console.print(f"     {escape(detail)}")


def report(
    run_id: Optional[str] = typer.Argument(None, help="Run ID to display (default: latest)"),
    format_json: bool = typer.Option(False, "--json", help="Output the stored summary as JSON"),
) -> None:
    """Display a stored run summary."""
    console = Console()

    project_root = find_project_root()
    project_config = load_project_config(project_root)
    store = RunStore(project_root, storage_dir=project_config.storage_dir)

    if run_id is not None:
        try:
            summary = store.load_summary(run_id)
        except FileNotFoundError:
            console.print(f"Run '{run_id}' not found.")
            available = store.list_runs()
            if available:
                console.print(f"Available runs: {', '.join(available[-10:])}")
            raise typer.Exit(code=1)
    else:
        summary = store.load_latest()
        if summary is None:
            console.print("[dim]No runs found. Run 'evalcourt run' first.[/dim]")
            raise typer.Exit(code=0)

    if format_json:
        output_json(summary)
    else:
        _render_run_detail(summary, console)
