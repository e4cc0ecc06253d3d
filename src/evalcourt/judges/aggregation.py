"""Consensus and weighted aggregation over normalized delegate verdicts.

Pure functions: every input is a normalized pass-probability in [0, 1]
(see evalcourt.models.verdict.normalize_verdict), so mixed verdict
types can be combined.
"""

from __future__ import annotations

from collections.abc import Sequence

from evalcourt.errors import JudgeConfigError
from evalcourt.models.verdict import is_passing

CONSENSUS_STRATEGIES: frozenset[str] = frozenset({"majority", "unanimous", "threshold"})


def agreement_ratio(values: Sequence[float]) -> float:
    """Fraction of values that count as a pass.

    Args:
        values: Normalized delegate values. Must be non-empty.

    Returns:
        k / n where k is the number of passing values.
    """
    if not values:
        raise ValueError("agreement_ratio requires at least one value")
    passing = sum(1 for v in values if is_passing(v))
    return passing / len(values)


def decide_consensus(
    strategy: str,
    ratio: float,
    threshold: float | None = None,
) -> bool:
    """Apply a consensus strategy to an agreement ratio.

    - majority: ratio > 0.5
    - unanimous: ratio == 1.0
    - threshold: ratio >= threshold

    Raises:
        JudgeConfigError: Unknown strategy, or missing threshold for
            the threshold strategy.
    """
    if strategy == "majority":
        return ratio > 0.5
    if strategy == "unanimous":
        return ratio == 1.0
    if strategy == "threshold":
        if threshold is None:
            raise JudgeConfigError("The 'threshold' strategy requires a threshold value")
        return ratio >= threshold
    raise JudgeConfigError(
        f"Unknown consensus strategy {strategy!r}. "
        f"Available strategies: {sorted(CONSENSUS_STRATEGIES)}"
    )


def normalize_weights(weights: Sequence[float]) -> list[float]:
    """Scale non-negative weights so they sum to 1.

    Raises:
        JudgeConfigError: If any weight is negative or all are zero.
    """
    if any(w < 0 for w in weights):
        raise JudgeConfigError("Judge weights must be non-negative")
    total = sum(weights)
    if total <= 0:
        raise JudgeConfigError("Judge weights must sum to a positive number")
    return [w / total for w in weights]


def weighted_score(values: Sequence[float], effective_weights: Sequence[float]) -> float:
    """Weighted sum of normalized values, clamped to [0, 1]."""
    if len(values) != len(effective_weights):
        raise ValueError("values and weights must have the same length")
    score = sum(v * w for v, w in zip(values, effective_weights))
    return max(0.0, min(1.0, score))


def bucket(value: float) -> str:
    """Distribution bucket key for a normalized value."""
    return str(round(value, 2))


def count_distribution(values: Sequence[float]) -> dict[str, int]:
    """Map each normalized-value bucket to the number of delegates in it."""
    distribution: dict[str, int] = {}
    for v in values:
        key = bucket(v)
        distribution[key] = distribution.get(key, 0) + 1
    return distribution


def weight_distribution(
    values: Sequence[float],
    effective_weights: Sequence[float],
) -> dict[str, float]:
    """Map each normalized-value bucket to the summed effective weight in it."""
    distribution: dict[str, float] = {}
    for v, w in zip(values, effective_weights):
        key = bucket(v)
        distribution[key] = round(distribution.get(key, 0.0) + w, 6)
    return distribution
