"""Run metrics computation.

Counts outcomes, computes latency percentiles, and breaks results down
by category. Guards against the 0-result and 1-result edge cases
(statistics.quantiles requires >= 2 data points).
"""

from __future__ import annotations

import statistics
from collections.abc import Sequence

from evalcourt.models.result import CaseResult, CaseStatus, CategoryMetrics, RunMetrics

UNCATEGORIZED = "uncategorized"


def _counts(results: Sequence[CaseResult]) -> tuple[int, int, int, int]:
    passed = sum(1 for r in results if r.status == CaseStatus.passed)
    failed = sum(1 for r in results if r.status == CaseStatus.failed)
    errored = sum(1 for r in results if r.status == CaseStatus.error)
    return len(results), passed, failed, errored


def _percentiles(latencies: list[float]) -> tuple[float, float, float]:
    if len(latencies) == 1:
        return latencies[0], latencies[0], latencies[0]
    # quantiles(n=100) gives 99 cut points -> index 49 is p50, 94 is p95
    cuts = statistics.quantiles(latencies, n=100)
    return cuts[49], cuts[94], cuts[98]


def compute_category_metrics(results: Sequence[CaseResult]) -> dict[str, CategoryMetrics]:
    """Group results by case category (None -> "uncategorized")."""
    groups: dict[str, list[CaseResult]] = {}
    for r in results:
        groups.setdefault(r.case.category or UNCATEGORIZED, []).append(r)

    breakdown: dict[str, CategoryMetrics] = {}
    for category in sorted(groups):
        total, passed, failed, errored = _counts(groups[category])
        breakdown[category] = CategoryMetrics(
            total=total,
            passed=passed,
            failed=failed,
            errored=errored,
            pass_rate=passed / total if total else 0.0,
        )
    return breakdown


def compute_metrics(results: Sequence[CaseResult]) -> RunMetrics:
    """Compute aggregate metrics over case results.

    ``pass_rate`` is passed / total, with errored cases counted in the
    total. Latency figures are in seconds and None when there are no
    results.
    """
    total, passed, failed, errored = _counts(results)
    if total == 0:
        return RunMetrics()

    latencies = [r.duration_seconds for r in results]
    p50, p95, p99 = _percentiles(latencies)

    return RunMetrics(
        total=total,
        passed=passed,
        failed=failed,
        errored=errored,
        pass_rate=passed / total,
        latency_avg=sum(latencies) / total,
        latency_p50=p50,
        latency_p95=p95,
        latency_p99=p99,
        by_category=compute_category_metrics(results),
    )
