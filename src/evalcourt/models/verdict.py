"""Verdict data models and pass-probability normalization.

A verdict is the raw output of a judge: a boolean, a score in [0, 1],
or a category label. Wherever a pass/fail decision is needed, the
verdict is normalized to a float in [0, 1] and compared against
PASS_THRESHOLD.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from evalcourt.errors import UnclassifiableVerdictError

# Normalized values at or above this count as a pass.
PASS_THRESHOLD = 0.5


class _VerdictBase(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    reasoning: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class BooleanVerdict(_VerdictBase):
    """Plain pass/fail judgment."""

    kind: Literal["boolean"] = "boolean"
    value: bool


class ScoreVerdict(_VerdictBase):
    """Numeric judgment on a 0.0 to 1.0 scale."""

    kind: Literal["score"] = "score"
    value: float = Field(ge=0.0, le=1.0)


class CategoryVerdict(_VerdictBase):
    """Categorical judgment, e.g. ``"helpful"`` or ``"refused"``."""

    kind: Literal["category"] = "category"
    value: str


Verdict = Annotated[
    Union[BooleanVerdict, ScoreVerdict, CategoryVerdict],
    Field(discriminator="kind"),
]


def normalize_verdict(
    verdict: BooleanVerdict | ScoreVerdict | CategoryVerdict,
    category_weights: Mapping[str, float] | None = None,
) -> float:
    """Normalize a verdict to a pass-probability in [0, 1].

    Args:
        verdict: The verdict to normalize.
        category_weights: Mapping of category label to weight, required
            for category verdicts.

    Returns:
        1.0/0.0 for booleans, the score for scores, the mapped weight
        for categories.

    Raises:
        UnclassifiableVerdictError: If a category verdict has no entry
            in *category_weights*.
    """
    if isinstance(verdict, BooleanVerdict):
        return 1.0 if verdict.value else 0.0
    if isinstance(verdict, ScoreVerdict):
        return verdict.value
    if category_weights is None or verdict.value not in category_weights:
        raise UnclassifiableVerdictError(verdict.value)
    weight = float(category_weights[verdict.value])
    if not 0.0 <= weight <= 1.0:
        raise UnclassifiableVerdictError(
            verdict.value,
            f"Category weight for {verdict.value!r} must be within [0, 1], got {weight}",
        )
    return weight


def is_passing(value: float) -> bool:
    """Return True if a normalized value counts as a pass."""
    return value >= PASS_THRESHOLD
