"""Judges -- simple LLM judgments and their composite strategies.

``build_judge`` constructs a judge tree from a plain spec dict, as found
in dataset files:

    {"type": "consensus", "strategy": "majority", "judges": [
        {"type": "simple", "provider": "openai", "model": "gpt-4o-mini"},
        {"type": "simple", "provider": "anthropic"},
    ]}
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from evalcourt.errors import JudgeConfigError
from evalcourt.judges.base import BaseJudge
from evalcourt.judges.composite import ConsensusJudge, WeightedJudge
from evalcourt.judges.simple import SimpleJudge, parse_judgment
from evalcourt.providers.base import BaseJudgeProvider
from evalcourt.providers.registry import get_provider

JUDGE_TYPES = ("simple", "consensus", "weighted")


def build_judge(
    spec: Mapping[str, Any],
    provider_factory: Callable[[str], BaseJudgeProvider] = get_provider,
) -> BaseJudge:
    """Build a judge (possibly composite) from a spec dict.

    Args:
        spec: Judge spec with a ``type`` key. Simple judges take a
            ``provider`` name plus provider settings; composites take a
            nested ``judges`` list (weighted entries carry ``weight``).
        provider_factory: Resolves provider names to instances.

    Raises:
        JudgeConfigError: If the spec is malformed.
    """
    if not isinstance(spec, Mapping):
        raise JudgeConfigError(f"Judge spec must be a mapping, got {type(spec).__name__}")

    spec = dict(spec)
    judge_type = spec.pop("type", "simple")

    if judge_type == "simple":
        provider_name = spec.pop("provider", "openai")
        try:
            provider = provider_factory(provider_name)
        except (ValueError, TypeError, ImportError) as exc:
            raise JudgeConfigError(str(exc)) from exc
        return SimpleJudge(provider, config=spec)

    delegates = spec.pop("judges", None)
    if not isinstance(delegates, list) or not delegates:
        raise JudgeConfigError(f"A {judge_type!r} judge requires a non-empty 'judges' list")

    if judge_type == "consensus":
        return ConsensusJudge(
            [build_judge(d, provider_factory) for d in delegates],
            strategy=spec.pop("strategy", "majority"),
            threshold=spec.pop("threshold", None),
            aggregate_metadata=bool(spec.pop("aggregate_metadata", False)),
            category_weights=spec.pop("category_weights", None),
        )

    if judge_type == "weighted":
        pairs: list[tuple[BaseJudge, float]] = []
        for d in delegates:
            if not isinstance(d, Mapping) or "weight" not in d:
                raise JudgeConfigError("Each weighted judge entry requires a 'weight'")
            d = dict(d)
            weight = d.pop("weight")
            if not isinstance(weight, (int, float)) or isinstance(weight, bool):
                raise JudgeConfigError(f"Judge weight must be a number, got {weight!r}")
            pairs.append((build_judge(d, provider_factory), float(weight)))
        return WeightedJudge(pairs, category_weights=spec.pop("category_weights", None))

    raise JudgeConfigError(
        f"Unknown judge type {judge_type!r}. Available types: {list(JUDGE_TYPES)}"
    )


__all__ = [
    "BaseJudge",
    "ConsensusJudge",
    "SimpleJudge",
    "WeightedJudge",
    "build_judge",
    "parse_judgment",
]
