"""EvalRunner: schedules every case of one or more datasets.

Runs dataset setup, applies the category filter, fans cases out over a
bounded pool (asyncio.Semaphore + TaskGroup) or runs them strictly in
order, streams each result to the reporter as it completes, and
assembles the RunSummary.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from evalcourt.datasets.dataset import Dataset
from evalcourt.errors import SetupError
from evalcourt.execution.executor import CaseExecutor, call_maybe_async
from evalcourt.execution.metrics import compute_metrics
from evalcourt.models.case import EvalCase
from evalcourt.models.config import RunConfig
from evalcourt.models.result import CaseError, CaseResult, CaseStatus, RunStatus, RunSummary
from evalcourt.reporting.base import BaseReporter, NullReporter

logger = logging.getLogger(__name__)


class RunnerState(str, Enum):
    """Lifecycle of a single run."""

    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


def filter_cases(cases: Sequence[EvalCase], categories: set[str]) -> list[EvalCase]:
    """Keep cases whose category is in *categories* (all cases when empty)."""
    if not categories:
        return list(cases)
    return [c for c in cases if c.category in categories]


class EvalRunner:
    """Orchestrates one evaluation run.

    A runner instance runs exactly once and owns its worker pool,
    result collection, and metrics for the lifetime of that run.
    """

    def __init__(
        self,
        config: RunConfig | None = None,
        reporter: BaseReporter | None = None,
    ) -> None:
        self.config = config or RunConfig()
        self.reporter = reporter or NullReporter()
        self.state = RunnerState.pending
        self._results: list[CaseResult] = []
        self._lock: asyncio.Lock | None = None
        self._setup_errors: list[SetupError] = []
        self._reporter_error: str | None = None

    async def run(self, datasets: Sequence[Dataset]) -> RunSummary:
        """Execute all eligible cases and return the run summary.

        Raises:
            RuntimeError: If this runner has already been used.
        """
        if self.state != RunnerState.pending:
            raise RuntimeError("EvalRunner instances can only run once")
        self.state = RunnerState.running
        started_at = datetime.now(timezone.utc)
        run_id = str(uuid.uuid4())
        self._lock = asyncio.Lock()

        planned = [
            (dataset, filter_cases(dataset.cases, self.config.categories))
            for dataset in datasets
        ]
        total = sum(len(cases) for _, cases in planned)

        failure: str | None = None
        if self._call_reporter("init", total):
            if total == 0:
                failure = self._no_cases_reason(datasets)
            elif self.config.parallel:
                await self._run_parallel(planned)
            else:
                await self._run_sequential(planned)

        if failure is None:
            failure = self._reporter_error
        if failure is None and self._setup_errors:
            failure = "; ".join(str(e) for e in self._setup_errors)

        summary = RunSummary(
            run_id=run_id,
            status=RunStatus.failed if failure else RunStatus.completed,
            results=list(self._results),
            metrics=compute_metrics(self._results),
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            error=failure,
        )

        # finalize is attempted even after an earlier reporter failure
        self._reporter_error = None
        if not self._call_reporter("finalize", summary) and summary.error is None:
            summary = summary.model_copy(
                update={"status": RunStatus.failed, "error": self._reporter_error}
            )

        self.state = (
            RunnerState.completed if summary.status == RunStatus.completed else RunnerState.failed
        )
        logger.debug(
            "Run %s %s: %d passed, %d failed, %d errored",
            run_id,
            summary.status.value,
            summary.metrics.passed,
            summary.metrics.failed,
            summary.metrics.errored,
        )
        return summary

    def _no_cases_reason(self, datasets: Sequence[Dataset]) -> str:
        if not datasets or not any(d.cases for d in datasets):
            return "No evaluation cases found"
        wanted = ", ".join(sorted(self.config.categories))
        return f"No evaluation cases match categories: {wanted}"

    def _call_reporter(self, hook: str, payload: Any) -> bool:
        """Invoke a reporter hook, recording the first failure.

        Once a hook has failed the reporter is considered broken and
        further hooks are skipped; the run will end as failed.
        """
        if self._reporter_error is not None:
            return False
        try:
            getattr(self.reporter, hook)(payload)
        except Exception as exc:
            logger.warning("Reporter %s() failed: %s", hook, exc)
            self._reporter_error = (
                f"Reporter {type(self.reporter).__name__}.{hook}() failed: "
                f"{type(exc).__name__}: {exc}"
            )
            return False
        return True

    async def _record(self, result: CaseResult) -> None:
        assert self._lock is not None
        async with self._lock:
            self._results.append(result)
            self._call_reporter("report_result", result)

    async def _setup(self, dataset: Dataset) -> tuple[Any, SetupError | None]:
        """Run the dataset's setup step once, returning (context, error)."""
        if dataset.setup_fn is None:
            return {}, None
        try:
            return await call_maybe_async(dataset.setup_fn), None
        except Exception as exc:
            error = SetupError(dataset.name, exc)
            logger.warning("%s", error)
            self._setup_errors.append(error)
            return None, error

    def _setup_failed_result(self, dataset: Dataset, case: EvalCase, error: SetupError) -> CaseResult:
        return CaseResult(
            case=case,
            status=CaseStatus.error,
            error=CaseError.from_exception(error),
            dataset=dataset.name,
        )

    async def _run_sequential(self, planned: list[tuple[Dataset, list[EvalCase]]]) -> None:
        """Execute cases one at a time, datasets and cases in listed order."""
        for dataset, cases in planned:
            if not cases:
                continue
            context, error = await self._setup(dataset)
            executor = CaseExecutor(dataset, timeout=self.config.timeout)
            for case in cases:
                if error is not None:
                    result = self._setup_failed_result(dataset, case, error)
                else:
                    result = await executor.execute(case, context)
                await self._record(result)

    async def _run_parallel(self, planned: list[tuple[Dataset, list[EvalCase]]]) -> None:
        """Execute cases concurrently with bounded parallelism."""
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def run_one(executor: CaseExecutor, case: EvalCase, context: Any) -> None:
            async with semaphore:
                result = await executor.execute(case, context)
            await self._record(result)

        # Setup runs before any case of its dataset is scheduled
        prepared: list[tuple[Dataset, list[EvalCase], Any, SetupError | None]] = []
        for dataset, cases in planned:
            if not cases:
                continue
            context, error = await self._setup(dataset)
            prepared.append((dataset, cases, context, error))

        async with asyncio.TaskGroup() as tg:
            for dataset, cases, context, error in prepared:
                if error is not None:
                    for case in cases:
                        await self._record(self._setup_failed_result(dataset, case, error))
                    continue
                executor = CaseExecutor(dataset, timeout=self.config.timeout)
                for case in cases:
                    tg.create_task(run_one(executor, case, context))


async def run_datasets_async(
    datasets: Sequence[Dataset],
    config: RunConfig | None = None,
    reporter: BaseReporter | None = None,
) -> RunSummary:
    """Run datasets with a fresh EvalRunner."""
    return await EvalRunner(config=config, reporter=reporter).run(datasets)


def run_datasets(
    datasets: Sequence[Dataset],
    reporter: BaseReporter | None = None,
    **options: Any,
) -> RunSummary:
    """Synchronous entry point: ``run_datasets([ds], parallel=False)``.

    Keyword options are validated into a RunConfig.
    """
    config = RunConfig(**options)
    return asyncio.run(run_datasets_async(datasets, config=config, reporter=reporter))
