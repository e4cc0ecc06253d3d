"""CaseExecutor: runs one EvalCase to a CaseResult with fault isolation.

Invokes the response generator, hands the response to the dataset's
judge, and classifies the verdict. Every failure along the way becomes
a ``status = error`` result; nothing raised here can abort the run.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass
from typing import Any

from evalcourt.datasets.dataset import Dataset
from evalcourt.errors import (
    CaseTimeoutError,
    EvalError,
    ResponseGenerationError,
    UnclassifiableVerdictError,
)
from evalcourt.judges.base import AnyVerdict
from evalcourt.models.case import EvalCase
from evalcourt.models.result import CaseError, CaseResult, CaseStatus
from evalcourt.models.verdict import (
    BooleanVerdict,
    CategoryVerdict,
    ScoreVerdict,
    is_passing,
    normalize_verdict,
)

logger = logging.getLogger(__name__)


def classify_verdict(
    verdict: AnyVerdict,
    config: Mapping[str, Any] | None = None,
) -> CaseStatus:
    """Map a verdict to pass or fail.

    Booleans map directly; scores pass at >= 0.5. Category verdicts
    need an explicit rule in *config*: ``pass_predicate`` (callable on
    the label), ``pass_categories`` (collection of passing labels) or
    ``category_weights`` (label -> weight, passing at >= 0.5).

    Raises:
        UnclassifiableVerdictError: For a category verdict with no rule.
        TypeError: If *verdict* is not a verdict model.
    """
    if isinstance(verdict, BooleanVerdict):
        return CaseStatus.passed if verdict.value else CaseStatus.failed
    if isinstance(verdict, ScoreVerdict):
        return CaseStatus.passed if is_passing(verdict.value) else CaseStatus.failed

    if not isinstance(verdict, CategoryVerdict):
        raise TypeError(f"Unsupported verdict type: {type(verdict).__name__}")
    config = config or {}
    predicate: Callable[[str], bool] | None = config.get("pass_predicate")
    pass_categories: Collection[str] | None = config.get("pass_categories")

    if predicate is not None:
        passed = bool(predicate(verdict.value))
    elif pass_categories is not None:
        passed = verdict.value in pass_categories
    elif config.get("category_weights") is not None:
        passed = is_passing(normalize_verdict(verdict, config["category_weights"]))
    else:
        raise UnclassifiableVerdictError(verdict.value)
    return CaseStatus.passed if passed else CaseStatus.failed


def accepts_context(fn: Callable[..., Any]) -> bool:
    """Return True if *fn* takes a second positional argument for the context."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return False
    positional = 0
    for param in sig.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 2


async def call_maybe_async(fn: Callable[..., Any], *args: Any) -> Any:
    """Await coroutine functions; run plain callables in a worker thread."""
    if inspect.iscoroutinefunction(fn):
        return await fn(*args)
    result = await asyncio.to_thread(fn, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


@dataclass
class _Outcome:
    response: Any = None
    verdict: AnyVerdict | None = None
    status: CaseStatus = CaseStatus.error
    error: BaseException | None = None


class CaseExecutor:
    """Executes cases of a single dataset.

    A list input is a multi-turn conversation: each turn is sent to the
    response function in order and the last response is judged.
    """

    def __init__(self, dataset: Dataset, timeout: float | None = None) -> None:
        self.dataset = dataset
        self.timeout = timeout
        self._pass_context = accepts_context(dataset.response_fn)

    async def execute(self, case: EvalCase, context: Any = None) -> CaseResult:
        """Run *case* end-to-end and return its CaseResult."""
        start = time.perf_counter()
        outcome = _Outcome()
        logger.debug("Running case %r from dataset '%s'", case.label(), self.dataset.name)

        try:
            if self.timeout is None:
                await self._run(case, context, outcome)
            else:
                async with asyncio.timeout(self.timeout):
                    await self._run(case, context, outcome)
        except TimeoutError:
            outcome.status = CaseStatus.error
            outcome.verdict = None
            outcome.error = CaseTimeoutError(self.timeout)

        elapsed = time.perf_counter() - start
        if outcome.status == CaseStatus.error:
            logger.debug("Case %r errored: %s", case.label(), outcome.error)

        return CaseResult(
            case=case,
            response=outcome.response,
            status=outcome.status,
            verdict=outcome.verdict if outcome.status != CaseStatus.error else None,
            metadata=dict(outcome.verdict.metadata) if outcome.verdict is not None else {},
            error=CaseError.from_exception(outcome.error) if outcome.error is not None else None,
            duration_seconds=elapsed,
            dataset=self.dataset.name,
        )

    async def _run(self, case: EvalCase, context: Any, outcome: _Outcome) -> None:
        try:
            outcome.response = await self._generate(case.input, context)
        except Exception as exc:
            outcome.error = ResponseGenerationError(exc)
            return

        try:
            verdict = await self.dataset.judge.evaluate(
                outcome.response, case.criteria, self.dataset.config
            )
            outcome.status = classify_verdict(verdict, self.dataset.config)
            outcome.verdict = verdict
        except EvalError as exc:
            outcome.status = CaseStatus.error
            outcome.error = exc
        except Exception as exc:
            logger.warning("Judge %s raised unexpectedly: %s", self.dataset.judge.describe(), exc)
            outcome.status = CaseStatus.error
            outcome.error = exc

    async def _generate(self, case_input: Any, context: Any) -> Any:
        if isinstance(case_input, list):
            response = None
            for turn in case_input:
                response = await self._call_response_fn(turn, context)
            return response
        return await self._call_response_fn(case_input, context)

    async def _call_response_fn(self, case_input: Any, context: Any) -> Any:
        if self._pass_context:
            return await call_maybe_async(self.dataset.response_fn, case_input, context)
        return await call_maybe_async(self.dataset.response_fn, case_input)
