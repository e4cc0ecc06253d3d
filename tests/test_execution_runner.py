"""Tests for evalcourt.execution.runner - EvalRunner orchestration."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from evalcourt.datasets.dataset import Dataset
from evalcourt.execution.runner import EvalRunner, RunnerState, filter_cases, run_datasets
from evalcourt.judges.base import BaseJudge
from evalcourt.judges.simple import SimpleJudge
from evalcourt.models.case import EvalCase
from evalcourt.models.config import RunConfig
from evalcourt.models.result import CaseStatus, RunStatus
from evalcourt.models.verdict import BooleanVerdict
from evalcourt.providers.static import StaticProvider
from evalcourt.reporting.base import CollectingReporter


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class KeywordJudge(BaseJudge):
    """Passes responses that contain a keyword."""

    def __init__(self, keyword: str = "good") -> None:
        self.keyword = keyword

    async def evaluate(self, response, criteria, config=None):
        return BooleanVerdict(value=self.keyword in str(response))


class ExplodingReporter(CollectingReporter):
    def __init__(self, hook: str) -> None:
        super().__init__()
        self.hook = hook

    def init(self, total_cases: int) -> None:
        super().init(total_cases)
        if self.hook == "init":
            raise RuntimeError("init broke")

    def report_result(self, result) -> None:
        super().report_result(result)
        if self.hook == "report_result":
            raise RuntimeError("report broke")

    def finalize(self, summary) -> None:
        super().finalize(summary)
        if self.hook == "finalize":
            raise RuntimeError("finalize broke")


def respond(q: str) -> str:
    if q == "crash":
        raise RuntimeError("generator failed")
    return q


def make_dataset(inputs: list[str], name: str = "ds", categories: list[str | None] | None = None, **kwargs: Any) -> Dataset:
    categories = categories or [None] * len(inputs)
    cases = [
        EvalCase(input=q, criteria="contains good", category=cat, id=f"{name}-{i}")
        for i, (q, cat) in enumerate(zip(inputs, categories))
    ]
    kwargs.setdefault("response_fn", respond)
    kwargs.setdefault("judge", KeywordJudge())
    return Dataset(name=name, cases=cases, **kwargs)


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestSequentialRun:
    def test_pass_fail_error_counts(self):
        reporter = CollectingReporter()
        summary = run_datasets(
            [make_dataset(["good answer", "bad answer", "crash"])],
            reporter=reporter,
            parallel=False,
        )

        assert summary.status is RunStatus.completed
        m = summary.metrics
        assert (m.total, m.passed, m.failed, m.errored) == (3, 1, 1, 1)
        assert [r.status for r in summary.results] == [
            CaseStatus.passed,
            CaseStatus.failed,
            CaseStatus.error,
        ]
        assert summary.results[2].error.type == "ResponseGenerationError"

    def test_reporter_contract(self):
        reporter = CollectingReporter()
        summary = run_datasets([make_dataset(["good", "bad"])], reporter=reporter, parallel=False)

        kinds = [kind for kind, _ in reporter.events]
        assert kinds == ["init", "result", "result", "finalize"]
        assert reporter.total_cases == 2
        assert reporter.summary is summary
        assert [r.case.id for r in reporter.results] == ["ds-0", "ds-1"]

    def test_datasets_run_in_order(self):
        summary = run_datasets(
            [make_dataset(["good"], name="a"), make_dataset(["good", "bad"], name="b")],
            parallel=False,
        )
        assert [r.dataset for r in summary.results] == ["a", "b", "b"]


class TestParallelRun:
    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        active = 0
        peak = 0

        async def slow(q):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.02)
            active -= 1
            return "good"

        dataset = make_dataset([f"q{i}" for i in range(12)], response_fn=slow)
        runner = EvalRunner(RunConfig(parallel=True, max_concurrency=3))
        summary = await runner.run([dataset])

        assert summary.metrics.passed == 12
        assert 1 < peak <= 3

    @pytest.mark.asyncio
    async def test_all_results_reported_once(self):
        reporter = CollectingReporter()
        dataset = make_dataset(["good", "bad", "crash", "good"])
        summary = await EvalRunner(RunConfig(max_concurrency=2), reporter).run([dataset])

        assert len(reporter.results) == 4
        assert sorted(r.case.id for r in reporter.results) == sorted(c.id for c in dataset.cases)
        assert summary.metrics.errored == 1


class TestSetup:
    def test_context_is_passed_to_response_fn(self):
        def setup():
            return {"suffix": " good"}

        def respond_with_context(q, ctx):
            return q + ctx["suffix"]

        summary = run_datasets(
            [make_dataset(["plain"], setup_fn=setup, response_fn=respond_with_context)],
            parallel=False,
        )
        assert summary.results[0].response == "plain good"
        assert summary.results[0].status is CaseStatus.passed

    def test_setup_runs_once_per_dataset(self):
        calls = []

        def setup():
            calls.append(1)
            return {}

        run_datasets([make_dataset(["a", "b", "c"], setup_fn=setup)])
        assert calls == [1]

    @pytest.mark.parametrize("parallel", [True, False])
    def test_setup_failure_errors_cases_and_fails_run(self, parallel):
        def broken_setup():
            raise ConnectionError("db down")

        summary = run_datasets(
            [
                make_dataset(["good", "good"], name="broken", setup_fn=broken_setup),
                make_dataset(["good"], name="healthy"),
            ],
            parallel=parallel,
        )

        assert summary.status is RunStatus.failed
        assert "broken" in summary.error
        broken = [r for r in summary.results if r.dataset == "broken"]
        assert [r.status for r in broken] == [CaseStatus.error, CaseStatus.error]
        assert broken[0].error.type == "SetupError"
        healthy = [r for r in summary.results if r.dataset == "healthy"]
        assert healthy[0].status is CaseStatus.passed


class TestFailedRuns:
    def test_zero_cases(self):
        reporter = CollectingReporter()
        summary = run_datasets([make_dataset([])], reporter=reporter)

        assert summary.status is RunStatus.failed
        assert summary.error == "No evaluation cases found"
        assert summary.results == []
        assert reporter.total_cases == 0
        assert reporter.summary is summary

    def test_category_filter_excludes_everything(self):
        summary = run_datasets(
            [make_dataset(["good"], categories=["security"])],
            categories={"billing"},
        )
        assert summary.status is RunStatus.failed
        assert "billing" in summary.error

    @pytest.mark.parametrize("hook", ["init", "report_result", "finalize"])
    def test_reporter_failure_fails_run(self, hook):
        reporter = ExplodingReporter(hook)
        summary = run_datasets([make_dataset(["good", "bad"])], reporter=reporter, parallel=False)

        assert summary.status is RunStatus.failed
        assert f"{hook}() failed" in summary.error
        assert reporter.events[-1][0] == "finalize"

    def test_report_result_failure_stops_further_reports(self):
        reporter = ExplodingReporter("report_result")
        run_datasets([make_dataset(["good", "bad", "good"])], reporter=reporter, parallel=False)
        assert len(reporter.results) == 1


class TestRunnerLifecycle:
    @pytest.mark.asyncio
    async def test_state_transitions(self):
        runner = EvalRunner(RunConfig(parallel=False))
        assert runner.state is RunnerState.pending
        await runner.run([make_dataset(["good"])])
        assert runner.state is RunnerState.completed

    @pytest.mark.asyncio
    async def test_failed_state(self):
        runner = EvalRunner()
        await runner.run([])
        assert runner.state is RunnerState.failed

    @pytest.mark.asyncio
    async def test_runner_cannot_be_reused(self):
        runner = EvalRunner()
        await runner.run([make_dataset(["good"])])
        with pytest.raises(RuntimeError, match="only run once"):
            await runner.run([make_dataset(["good"])])

    def test_unique_run_ids(self):
        dataset = make_dataset(["good"])
        assert run_datasets([dataset]).run_id != run_datasets([dataset]).run_id

    def test_invalid_options_rejected(self):
        with pytest.raises(ValueError):
            run_datasets([make_dataset(["good"])], max_concurrency=0)


class TestFilterCases:
    def test_empty_filter_keeps_all(self):
        cases = make_dataset(["a", "b"], categories=["x", None]).cases
        assert filter_cases(cases, set()) == cases

    def test_uncategorized_cases_are_excluded_by_filter(self):
        cases = make_dataset(["a", "b"], categories=["x", None]).cases
        assert [c.input for c in filter_cases(cases, {"x"})] == ["a"]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

_inputs = st.lists(st.sampled_from(["good", "bad", "crash", "good stuff"]), min_size=1, max_size=10)


class TestRunnerProperties:
    @settings(max_examples=25, deadline=None)
    @given(_inputs)
    def test_repeated_runs_classify_identically(self, inputs):
        dataset = make_dataset(inputs, judge=SimpleJudge(StaticProvider("YES\nalways")))

        def statuses():
            summary = run_datasets([dataset])
            return sorted((r.case.id, r.status.value) for r in summary.results)

        assert statuses() == statuses()

    @settings(max_examples=25, deadline=None)
    @given(
        st.lists(
            st.tuples(
                st.sampled_from(["good", "bad", "crash"]),
                st.sampled_from(["security", "billing", "tone", None]),
            ),
            min_size=1,
            max_size=10,
        ),
        st.sets(st.sampled_from(["security", "billing", "tone"]), min_size=1),
    )
    def test_category_filter_is_a_subset(self, rows, wanted):
        dataset = make_dataset([q for q, _ in rows], categories=[c for _, c in rows])

        full = {r.case.id: r.status for r in run_datasets([dataset]).results}
        filtered = run_datasets([dataset], categories=wanted)

        expected_ids = {c.id for c in dataset.cases if c.category in wanted}
        if not expected_ids:
            assert filtered.status is RunStatus.failed
            return
        got = {r.case.id: r.status for r in filtered.results}
        assert set(got) == expected_ids
        assert all(full[case_id] == status for case_id, status in got.items())
