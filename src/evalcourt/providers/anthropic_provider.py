"""Anthropic judge provider.

Sends the judgment prompt to the messages API and joins the text
blocks of the reply.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from evalcourt.providers.base import BaseJudgeProvider


class AnthropicProvider(BaseJudgeProvider):
    """Provider for the Anthropic messages API.

    Uses lazy-initialized AsyncAnthropic client that reads ANTHROPIC_API_KEY
    from the environment automatically.
    """

    default_model = "claude-3-5-haiku-latest"

    def __init__(self) -> None:
        self._client: Any = None

    def _get_client(self) -> Any:
        """Lazily initialize and return the AsyncAnthropic client."""
        if self._client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError as exc:
                raise ImportError("The anthropic judge provider needs the SDK: pip install 'evalcourt[anthropic]'") from exc

            self._client = AsyncAnthropic()
        return self._client

    async def call(self, prompt: str, config: Mapping[str, Any]) -> str:
        client = self._get_client()

        kwargs: dict[str, Any] = {
            "model": config.get("model") or self.default_model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": config.get("max_tokens") or 1024,
        }
        # Anthropic uses a separate system param
        if config.get("system_prompt"):
            kwargs["system"] = config["system_prompt"]
        if config.get("temperature") is not None:
            kwargs["temperature"] = config["temperature"]

        kwargs.update(config.get("extras") or {})

        response = await client.messages.create(**kwargs)
        parts = [block.text for block in response.content if block.type == "text"]
        return "\n".join(parts)

    def provider_name(self) -> str:
        return "anthropic"
