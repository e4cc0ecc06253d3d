"""Base judge abstract class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from evalcourt.models.verdict import BooleanVerdict, CategoryVerdict, ScoreVerdict

AnyVerdict = BooleanVerdict | ScoreVerdict | CategoryVerdict


class BaseJudge(ABC):
    """Abstract base class for judges.

    Each judge receives a response, the case criteria and a config
    mapping, and renders a verdict. Failures are raised as JudgeError
    subclasses. Implementations must not mutate *config*.
    """

    @abstractmethod
    async def evaluate(
        self,
        response: Any,
        criteria: str,
        config: Mapping[str, Any] | None = None,
    ) -> AnyVerdict:
        """Render a verdict for *response* against *criteria*.

        Args:
            response: Output of the response generator.
            criteria: Text describing the pass condition.
            config: Per-call configuration (category weights, provider
                settings).

        Returns:
            A BooleanVerdict, ScoreVerdict or CategoryVerdict.

        Raises:
            JudgeError: If no verdict could be rendered.
        """

    def describe(self) -> str:
        """Short label used in logs and metadata."""
        return type(self).__name__
