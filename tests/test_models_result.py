"""Tests for evalcourt.models.result - CaseResult and RunSummary serialization."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from evalcourt.models.case import EvalCase
from evalcourt.models.result import (
    CaseError,
    CaseResult,
    CaseStatus,
    RunMetrics,
    RunStatus,
    RunSummary,
)
from evalcourt.models.verdict import BooleanVerdict, ScoreVerdict


def _summary(**overrides) -> RunSummary:
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    defaults = dict(
        run_id="run-1",
        status=RunStatus.completed,
        started_at=start,
        finished_at=start + timedelta(seconds=2.5),
    )
    defaults.update(overrides)
    return RunSummary(**defaults)


class TestCaseError:
    def test_from_exception(self):
        err = CaseError.from_exception(KeyError("missing"))
        assert err.type == "KeyError"
        assert "missing" in err.message


class TestEvalCaseLabel:
    def test_uses_id_when_present(self):
        assert EvalCase(input="x", criteria="c", id="case-7").label() == "case-7"

    def test_truncates_long_input(self):
        label = EvalCase(input="word " * 40, criteria="c").label(width=20)
        assert len(label) == 20
        assert label.endswith("...")

    def test_multi_turn_uses_last_turn(self):
        assert EvalCase(input=["hi", "bye"], criteria="c").label() == "bye"


class TestRunSummary:
    def test_duration(self):
        assert _summary().duration_seconds == 2.5

    def test_all_passed_requires_no_failures(self):
        assert _summary().all_passed is True
        assert _summary(metrics=RunMetrics(total=1, failed=1)).all_passed is False
        assert _summary(status=RunStatus.failed, error="boom").all_passed is False

    def test_json_round_trip_keeps_verdict_kind(self):
        case = EvalCase(input="q", criteria="c", category="security")
        results = [
            CaseResult(case=case, response="a", status=CaseStatus.passed, verdict=BooleanVerdict(value=True)),
            CaseResult(case=case, response="b", status=CaseStatus.failed, verdict=ScoreVerdict(value=0.2)),
        ]
        summary = _summary(results=results)

        loaded = RunSummary.model_validate_json(summary.model_dump_json())
        assert loaded == summary
        assert isinstance(loaded.results[1].verdict, ScoreVerdict)
        assert loaded.results[0].status is CaseStatus.passed

    def test_to_json_writes_repr_for_unserializable_values(self):
        class Handle:
            def __repr__(self) -> str:
                return "Handle(7)"

        case = EvalCase(input="q", criteria="c")
        verdict = BooleanVerdict(value=True, metadata={"raw": Handle()})
        summary = _summary(
            results=[CaseResult(case=case, response=Handle(), status=CaseStatus.passed, verdict=verdict)]
        )

        loaded = RunSummary.model_validate_json(summary.to_json())
        assert loaded.results[0].response == "Handle(7)"
        assert loaded.results[0].verdict.metadata == {"raw": "Handle(7)"}
