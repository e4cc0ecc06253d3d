"""StaticProvider - returns a fixed response without calling an LLM.

Useful for dry runs of a dataset and for deterministic tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from evalcourt.providers.base import BaseJudgeProvider


class StaticProvider(BaseJudgeProvider):
    """Provider that always answers with the same text.

    The response can also be overridden per call with the
    ``static_response`` config key.
    """

    def __init__(self, response: str = "YES\nStatic judgment") -> None:
        self.response = response
        self.prompts: list[str] = []

    async def call(self, prompt: str, config: Mapping[str, Any]) -> str:
        self.prompts.append(prompt)
        return config.get("static_response", self.response)

    def provider_name(self) -> str:
        return "static"
