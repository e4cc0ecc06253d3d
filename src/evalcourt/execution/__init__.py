"""evalcourt execution - case executor, runner, and run metrics."""

from evalcourt.execution.executor import CaseExecutor, classify_verdict
from evalcourt.execution.metrics import compute_metrics
from evalcourt.execution.runner import (
    EvalRunner,
    RunnerState,
    filter_cases,
    run_datasets,
    run_datasets_async,
)

__all__ = [
    "CaseExecutor",
    "EvalRunner",
    "RunnerState",
    "classify_verdict",
    "compute_metrics",
    "filter_cases",
    "run_datasets",
    "run_datasets_async",
]
