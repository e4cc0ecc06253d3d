"""evalcourt data models - re-exports all public model classes."""

from evalcourt.models.case import EvalCase
from evalcourt.models.config import JudgeDefaults, ProjectConfig, RunConfig
from evalcourt.models.dataset_file import DatasetFile
from evalcourt.models.result import (
    CaseError,
    CaseResult,
    CaseStatus,
    CategoryMetrics,
    RunMetrics,
    RunStatus,
    RunSummary,
)
from evalcourt.models.verdict import (
    PASS_THRESHOLD,
    BooleanVerdict,
    CategoryVerdict,
    ScoreVerdict,
    Verdict,
    is_passing,
    normalize_verdict,
)

__all__ = [
    "PASS_THRESHOLD",
    "BooleanVerdict",
    "CaseError",
    "CaseResult",
    "CaseStatus",
    "CategoryMetrics",
    "CategoryVerdict",
    "DatasetFile",
    "EvalCase",
    "JudgeDefaults",
    "ProjectConfig",
    "RunConfig",
    "RunMetrics",
    "RunStatus",
    "RunSummary",
    "ScoreVerdict",
    "Verdict",
    "is_passing",
    "normalize_verdict",
]
