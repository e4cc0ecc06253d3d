"""Result data models for case outcomes and run summaries.

These models encode the execution output contract: one CaseResult per
evaluated case, plus a RunSummary holding counts, latency statistics,
and the per-category breakdown. Designed for JSON serialization and
lossless round-trip deserialization.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from evalcourt.models.case import EvalCase
from evalcourt.models.verdict import Verdict


class CaseStatus(str, Enum):
    """Outcome of a single case."""

    passed = "pass"
    failed = "fail"
    error = "error"


class RunStatus(str, Enum):
    """Process-level outcome of a run."""

    completed = "completed"
    failed = "failed"


class CaseError(BaseModel):
    """Error recorded on a CaseResult with ``status = error``."""

    model_config = {"frozen": True}

    type: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> CaseError:
        return cls(type=type(exc).__name__, message=str(exc))


class CaseResult(BaseModel):
    """Result of executing one EvalCase. Never mutated after creation."""

    model_config = {"frozen": True, "extra": "forbid"}

    case: EvalCase
    response: Any = None
    status: CaseStatus
    verdict: Verdict | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: CaseError | None = None
    duration_seconds: float = 0.0
    dataset: str | None = None


class CategoryMetrics(BaseModel):
    """Counts for the cases of a single category."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    errored: int = 0
    pass_rate: float = 0.0


class RunMetrics(BaseModel):
    """Aggregate counts and latency statistics for a run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    errored: int = 0
    pass_rate: float = 0.0
    latency_avg: float | None = None
    latency_p50: float | None = None
    latency_p95: float | None = None
    latency_p99: float | None = None
    by_category: dict[str, CategoryMetrics] = Field(default_factory=dict)


class RunSummary(BaseModel):
    """Final outcome of a run over one or more datasets.

    ``results`` are ordered by completion, which only matches input
    order for sequential runs.
    """

    run_id: str
    status: RunStatus
    results: list[CaseResult] = Field(default_factory=list)
    metrics: RunMetrics = Field(default_factory=RunMetrics)
    started_at: datetime
    finished_at: datetime
    error: str | None = None

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def all_passed(self) -> bool:
        return (
            self.status == RunStatus.completed
            and self.metrics.failed == 0
            and self.metrics.errored == 0
        )

    def to_json(self) -> str:
        """Serialize to indented JSON.

        Responses and metadata come from user code, so values JSON cannot
        represent are written as their repr().
        """
        return self.model_dump_json(indent=2, fallback=repr)
