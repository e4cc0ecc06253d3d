"""Dataset - cases plus everything needed to generate and judge responses.

These are plain dataclasses (not Pydantic) because they carry callables
and judge instances rather than serializable data.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from evalcourt.judges.base import BaseJudge
from evalcourt.models.case import EvalCase


@dataclass
class Dataset:
    """A named collection of cases with its response function and judge.

    ``response_fn`` takes ``(input)`` or ``(input, context)`` and may be
    sync or async. ``setup_fn`` runs once before the dataset's first
    case; its return value is the context passed to ``response_fn``.
    ``config`` is passed to the judge on every call and may carry
    ``category_weights``, ``pass_categories`` or ``pass_predicate``.
    """

    name: str
    cases: list[EvalCase]
    response_fn: Callable[..., Any]
    judge: BaseJudge
    config: dict[str, Any] = field(default_factory=dict)
    setup_fn: Callable[[], Any] | None = None
