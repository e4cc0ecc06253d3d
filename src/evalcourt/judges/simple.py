"""SimpleJudge -- single LLM judgment parsed from a YES/NO reply.

Builds the judgment prompt, calls one provider, and parses the leading
token of the reply into a BooleanVerdict.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from evalcourt.errors import JudgeError, MalformedResponseError, ProviderTransportError
from evalcourt.judges.base import BaseJudge
from evalcourt.judges.prompt import build_judge_prompt
from evalcourt.models.verdict import BooleanVerdict
from evalcourt.providers.base import BaseJudgeProvider

_VERDICT_TOKEN = re.compile(r"^(YES|NO)\b")


def parse_judgment(text: str) -> BooleanVerdict:
    """Parse raw provider text into a BooleanVerdict.

    The first line must begin with the case-sensitive token YES or NO.
    Everything after the first newline is the reasoning.

    Raises:
        MalformedResponseError: If the first line has no YES/NO token.
    """
    first_line, _, rest = text.partition("\n")
    match = _VERDICT_TOKEN.match(first_line.strip())
    if match is None:
        raise MalformedResponseError(text)

    reasoning = rest.strip()
    if not reasoning:
        # Allow "YES - looks fine" on a single line
        reasoning = first_line.strip()[match.end():].strip(" \t-:.,")
    reasoning_or_none = reasoning or None

    metadata: dict[str, Any] = {}
    if reasoning_or_none is not None:
        metadata["reasoning"] = reasoning_or_none

    return BooleanVerdict(
        value=match.group(1) == "YES",
        reasoning=reasoning_or_none,
        metadata=metadata,
    )


class SimpleJudge(BaseJudge):
    """LLM-backed judge with a single delegate provider.

    The judge's own config (model, temperature, extras) is merged with
    the per-call config; call-level keys take precedence.
    """

    def __init__(
        self,
        provider: BaseJudgeProvider,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        self.provider = provider
        self.config = dict(config or {})

    async def evaluate(
        self,
        response: Any,
        criteria: str,
        config: Mapping[str, Any] | None = None,
    ) -> BooleanVerdict:
        merged = {**self.config, **(config or {})}
        prompt = build_judge_prompt(response, criteria)

        try:
            text = await self.provider.call(prompt, merged)
        except JudgeError:
            raise
        except Exception as exc:
            raise ProviderTransportError(exc) from exc

        verdict = parse_judgment(text)
        metadata = {
            **verdict.metadata,
            "judge": "simple",
            "provider": self.provider.provider_name(),
        }
        if merged.get("model"):
            metadata["model"] = merged["model"]
        return verdict.model_copy(update={"metadata": metadata})

    def describe(self) -> str:
        return f"simple({self.provider.provider_name()})"
