"""EvalCase model - one input/criteria pair to be evaluated."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class EvalCase(BaseModel):
    """A single evaluation case.

    ``input`` is passed to the response generator as-is. A list input is
    treated as a multi-turn conversation. ``criteria`` is the text the
    judge evaluates the response against.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    input: Any
    criteria: str
    category: str | None = None
    expected: Any | None = None
    id: str | None = None

    def label(self, width: int = 60) -> str:
        """Short human-readable description of the case input."""
        if self.id:
            return self.id
        source = self.input
        if isinstance(source, list):
            source = source[-1] if source else "Multi-turn conversation"
        text = source if isinstance(source, str) else repr(source)
        text = " ".join(text.split())
        if len(text) > width:
            return text[: width - 3] + "..."
        return text
