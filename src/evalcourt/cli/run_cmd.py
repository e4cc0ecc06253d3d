"""evalcourt run -- load datasets, evaluate every case, and report.

Resolves dataset files (explicit paths or the project's datasets_dir),
runs them through EvalRunner with the console reporter, persists the
summary, and exits with a code reflecting the outcome.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from evalcourt.datasets.dataset import Dataset
from evalcourt.datasets.loader import DATASET_SUFFIXES, discover_datasets, load_dataset
from evalcourt.errors import DatasetLoadError
from evalcourt.execution.runner import run_datasets
from evalcourt.models.config import ProjectConfig, find_project_root, load_project_config
from evalcourt.models.result import RunStatus, RunSummary
from evalcourt.reporting.base import BaseReporter, NullReporter
from evalcourt.reporting.console import ConsoleReporter, output_json
from evalcourt.storage.json_store import RunStore

console = Console(stderr=True)

EXIT_PASSED = 0
EXIT_CASES_FAILED = 1
EXIT_RUN_FAILED = 2
EXIT_USAGE = 3


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=verbose)
    root = logging.getLogger("evalcourt")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def exit_code_for(summary: RunSummary) -> int:
    """Map a run summary to the process exit code."""
    if summary.status == RunStatus.failed:
        return EXIT_RUN_FAILED
    if summary.metrics.failed or summary.metrics.errored:
        return EXIT_CASES_FAILED
    return EXIT_PASSED


def resolve_dataset_files(paths: list[Path], project_root: Path, project_config: ProjectConfig) -> list[Path]:
    """Expand files and directories into a sorted, de-duplicated file list.

    Raises:
        typer.BadParameter: If a path does not exist or is not a dataset file.
    """
    if not paths:
        paths = [project_root / project_config.datasets_dir]

    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(discover_datasets(path))
        elif path.is_file():
            if path.suffix not in DATASET_SUFFIXES:
                raise typer.BadParameter(f"'{path}' is not a .yaml/.yml dataset file")
            files.append(path)
        else:
            raise typer.BadParameter(f"'{path}' does not exist")

    seen: set[Path] = set()
    unique: list[Path] = []
    for f in files:
        key = f.resolve()
        if key not in seen:
            seen.add(key)
            unique.append(f)
    return unique


def run(
    paths: Optional[List[Path]] = typer.Argument(None, help="Dataset files or directories (default: project datasets_dir)"),
    sequential: bool = typer.Option(False, "--sequential", help="Run cases one at a time in input order"),
    max_concurrency: Optional[int] = typer.Option(None, "--max-concurrency", "-j", min=1, help="Max concurrent cases"),
    category: Optional[List[str]] = typer.Option(None, "--category", "-c", help="Only run cases in this category (repeatable)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-case timeout in seconds"),
    trace: bool = typer.Option(False, "--trace", help="Print one line per case with failure details"),
    format_json: bool = typer.Option(False, "--json", help="Output the run summary as pure JSON to stdout"),
    no_save: bool = typer.Option(False, "--no-save", help="Do not persist the run summary"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging on stderr"),
) -> None:
    """Evaluate datasets and exit non-zero when any case does not pass."""
    configure_logging(verbose)

    project_root = find_project_root()
    try:
        project_config = load_project_config(project_root)
    except (ValueError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Invalid project config:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_USAGE)

    # Dataset files refer to project modules by import path
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    try:
        files = resolve_dataset_files(list(paths or []), project_root, project_config)
    except typer.BadParameter as exc:
        console.print(f"[bold red]Usage error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_USAGE)

    datasets: list[Dataset] = []
    for path in files:
        try:
            datasets.append(load_dataset(path, project_config))
        except DatasetLoadError as exc:
            console.print(f"[bold red]Dataset error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=EXIT_USAGE)

    options = project_config.run.model_dump()
    if sequential:
        options["parallel"] = False
    if max_concurrency is not None:
        options["max_concurrency"] = max_concurrency
    if category:
        options["categories"] = set(category)
    if timeout is not None:
        options["timeout"] = timeout

    reporter: BaseReporter
    if format_json:
        reporter = NullReporter()
    else:
        reporter = ConsoleReporter(console=Console(), trace=trace)

    try:
        summary = run_datasets(datasets, reporter=reporter, **options)
    except ValidationError as exc:
        console.print(f"[bold red]Invalid run options:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_USAGE)

    if not no_save:
        store = RunStore(project_root, storage_dir=project_config.storage_dir)
        store.save_summary(summary)

    if format_json:
        output_json(summary)
    elif not no_save:
        console.print(f"[dim]Run saved: {summary.run_id}[/dim]")

    code = exit_code_for(summary)
    if code != EXIT_PASSED:
        raise typer.Exit(code=code)
