"""Composite judges -- consensus and weighted voting over delegate judges.

Both composites invoke every delegate concurrently with the same
response and criteria, join them before returning, and fail as a whole
if any delegate fails. Delegate verdicts are normalized to
pass-probabilities so boolean, score and category verdicts can be mixed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from evalcourt.errors import DelegateFailedError, JudgeConfigError
from evalcourt.judges.aggregation import (
    CONSENSUS_STRATEGIES,
    agreement_ratio,
    count_distribution,
    decide_consensus,
    normalize_weights,
    weight_distribution,
    weighted_score,
)
from evalcourt.judges.base import AnyVerdict, BaseJudge
from evalcourt.models.verdict import BooleanVerdict, ScoreVerdict, is_passing, normalize_verdict

logger = logging.getLogger(__name__)


async def gather_delegates(
    judges: Sequence[BaseJudge],
    response: Any,
    criteria: str,
    config: Mapping[str, Any] | None,
) -> list[AnyVerdict]:
    """Run all delegates concurrently and return verdicts in delegate order.

    Each delegate receives its own copy of *config*. If any delegate
    fails the remaining ones are cancelled and the failure with the
    lowest delegate index is raised.

    Raises:
        DelegateFailedError: Wrapping the failing delegate's error.
    """
    base_config = dict(config or {})

    async def run_one(index: int, judge: BaseJudge) -> AnyVerdict:
        try:
            return await judge.evaluate(response, criteria, dict(base_config))
        except Exception as exc:
            logger.debug("Delegate #%d (%s) failed: %s", index, judge.describe(), exc)
            raise DelegateFailedError(index, exc) from exc

    logger.debug("Fanning out to %d delegate judges", len(judges))
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(run_one(i, j)) for i, j in enumerate(judges)]
    except ExceptionGroup as group:
        failures = [e for e in group.exceptions if isinstance(e, DelegateFailedError)]
        if not failures:
            raise
        raise min(failures, key=lambda e: e.index) from None

    return [task.result() for task in tasks]


def _individual_result(
    index: int,
    verdict: AnyVerdict,
    normalized: float,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "index": index,
        "kind": verdict.kind,
        "value": verdict.value,
        "normalized": normalized,
        "reasoning": verdict.reasoning,
        "metadata": dict(verdict.metadata),
        **extra,
    }


def _combined_reasoning(verdicts: Sequence[AnyVerdict]) -> str | None:
    parts = [v.reasoning for v in verdicts if v.reasoning]
    return " | ".join(parts) if parts else None


class ConsensusJudge(BaseJudge):
    """Agreement-based combination of N delegate judges.

    Configuration:
        judges: Ordered delegate judges (non-empty).
        strategy: ``majority`` (ratio > 0.5), ``unanimous`` (ratio == 1.0)
            or ``threshold`` (ratio >= threshold).
        threshold: Minimum agreement ratio, required for ``threshold``.
        aggregate_metadata: Include per-delegate results, the value
            distribution and combined reasoning in the verdict metadata.
        category_weights: Fallback label -> weight mapping for category
            verdicts when the call config has none.
    """

    def __init__(
        self,
        judges: Sequence[BaseJudge],
        strategy: str = "majority",
        threshold: float | None = None,
        aggregate_metadata: bool = False,
        category_weights: Mapping[str, float] | None = None,
    ) -> None:
        if not judges:
            raise JudgeConfigError("Consensus judge requires a non-empty list of judges")
        if strategy not in CONSENSUS_STRATEGIES:
            raise JudgeConfigError(
                f"Unknown consensus strategy {strategy!r}. "
                f"Available strategies: {sorted(CONSENSUS_STRATEGIES)}"
            )
        if strategy == "threshold":
            if threshold is None:
                raise JudgeConfigError("The 'threshold' strategy requires a threshold value")
            if not 0.0 <= threshold <= 1.0:
                raise JudgeConfigError(f"Consensus threshold must be within [0, 1], got {threshold}")
        self.judges = tuple(judges)
        self.strategy = strategy
        self.threshold = threshold
        self.aggregate_metadata = aggregate_metadata
        self.category_weights = dict(category_weights) if category_weights else None

    async def evaluate(
        self,
        response: Any,
        criteria: str,
        config: Mapping[str, Any] | None = None,
    ) -> BooleanVerdict:
        verdicts = await gather_delegates(self.judges, response, criteria, config)

        weights = (config or {}).get("category_weights") or self.category_weights
        values = [normalize_verdict(v, weights) for v in verdicts]

        ratio = agreement_ratio(values)
        consensus = decide_consensus(self.strategy, ratio, self.threshold)
        agreeing = sum(1 for v in values if is_passing(v))

        metadata: dict[str, Any] = {
            "strategy": self.strategy,
            "consensus": consensus,
            "agreement_ratio": ratio,
            "total_judges": len(values),
            "agreeing_judges": agreeing,
        }
        if self.strategy == "threshold":
            metadata["threshold"] = self.threshold

        reasoning = None
        if self.aggregate_metadata:
            reasoning = _combined_reasoning(verdicts)
            metadata["individual_results"] = [
                _individual_result(i, v, n) for i, (v, n) in enumerate(zip(verdicts, values))
            ]
            metadata["distribution"] = count_distribution(values)
            if reasoning is not None:
                metadata["reasoning"] = reasoning

        return BooleanVerdict(value=consensus, reasoning=reasoning, metadata=metadata)

    def describe(self) -> str:
        return f"consensus[{self.strategy}]({len(self.judges)})"


class WeightedJudge(BaseJudge):
    """Weighted average of N delegate judges' normalized verdicts.

    Weights are non-negative and need not sum to 1; they are normalized
    internally. The result is a ScoreVerdict and is never binarized here.
    """

    def __init__(
        self,
        weighted_judges: Sequence[tuple[BaseJudge, float]],
        category_weights: Mapping[str, float] | None = None,
    ) -> None:
        if not weighted_judges:
            raise JudgeConfigError("Weighted judge requires a non-empty list of (judge, weight) pairs")
        self.judges = tuple(judge for judge, _ in weighted_judges)
        self.weights = tuple(float(weight) for _, weight in weighted_judges)
        self.effective_weights = tuple(normalize_weights(self.weights))
        self.category_weights = dict(category_weights) if category_weights else None

    async def evaluate(
        self,
        response: Any,
        criteria: str,
        config: Mapping[str, Any] | None = None,
    ) -> ScoreVerdict:
        verdicts = await gather_delegates(self.judges, response, criteria, config)

        weights = (config or {}).get("category_weights") or self.category_weights
        values = [normalize_verdict(v, weights) for v in verdicts]

        score = weighted_score(values, self.effective_weights)
        metadata: dict[str, Any] = {
            "strategy": "weighted",
            "weighted_score": score,
            "distribution": weight_distribution(values, self.effective_weights),
            "individual_results": [
                _individual_result(i, v, n, effective_weight=w)
                for i, (v, n, w) in enumerate(zip(verdicts, values, self.effective_weights))
            ],
        }
        reasoning = _combined_reasoning(verdicts)
        if reasoning is not None:
            metadata["reasoning"] = reasoning

        return ScoreVerdict(value=score, reasoning=reasoning, metadata=metadata)

    def describe(self) -> str:
        return f"weighted({len(self.judges)})"
